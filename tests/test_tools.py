"""Unit tests for dnaerys_mcp.core.tools handlers."""

import logging

import pytest

from dnaerys_mcp.clients.store import VariantStoreClient
from dnaerys_mcp.constants import EMPTY_RESULT
from dnaerys_mcp.core import tools
from dnaerys_mcp.core.queries import InheritancePattern, Zygosity
from dnaerys_mcp.core.tools import (
    close_store_client,
    get_dispatcher,
    get_store_client,
    handle_count_samples,
    handle_count_variants,
    handle_dataset_info,
    handle_kinship,
    handle_sample_ids,
    handle_select_inheritance,
    handle_select_samples,
    handle_select_variants,
)

REGION = {"chromosome": "1", "start": 1000, "end": 2000}


class TestSingletons:
    @pytest.mark.unit
    def test_store_client_built_from_config(self, config):
        client = get_store_client(config)
        assert isinstance(client, VariantStoreClient)
        assert client.base_url == config.store_url
        assert get_store_client(config) is client

    @pytest.mark.unit
    def test_dispatcher_shares_store_client(self, config):
        dispatcher = get_dispatcher(config)
        assert dispatcher.client is get_store_client(config)
        assert get_dispatcher(config) is dispatcher

    @pytest.mark.unit
    def test_close_store_client(self, installed_store):
        close_store_client()
        assert installed_store.closed
        assert tools._store_client is None
        assert tools._dispatcher is None

    @pytest.mark.unit
    def test_close_without_client(self):
        close_store_client()
        assert tools._store_client is None


class TestRegionHandlers:
    @pytest.mark.unit
    def test_count_variants(self, config, installed_store):
        installed_store.replies["countVariantsInRegion"] = {"count": 5}
        assert handle_count_variants({**REGION, "variant_type": "SNV"}, config) == 5
        assert installed_store.last_request["ann"] == {"vtypes": ["SNV"]}

    @pytest.mark.unit
    def test_sample_key_selects_sample_scope(self, config, installed_store):
        installed_store.replies["countVariantsInRegionInSamples"] = {"count": 2}
        args = {**REGION, "sample_id": "HG00096"}
        assert handle_count_variants(args, config, Zygosity.HOM) == 2
        assert installed_store.methods == ["countVariantsInRegionInSamples"]

    @pytest.mark.unit
    def test_sample_key_without_value_is_void(self, config, installed_store):
        assert handle_count_variants({**REGION, "sample_id": None}, config) == 0
        assert installed_store.calls == []

    @pytest.mark.unit
    def test_select_variants_paging_args(self, config, installed_store):
        handle_select_variants({**REGION, "skip": 30, "limit": 10}, config, Zygosity.HET)
        request = installed_store.last_request
        assert (request["skip"], request["limit"]) == (30, 10)
        assert (request["hom"], request["het"]) == (False, True)

    @pytest.mark.unit
    def test_select_variants_in_sample(self, config, installed_store):
        result = handle_select_variants({**REGION, "sample_id": "NA12878"}, config)
        assert result == [EMPTY_RESULT]
        assert installed_store.methods == ["selectVariantsInRegionInSamples"]

    @pytest.mark.unit
    def test_count_and_select_samples(self, config, installed_store):
        installed_store.replies["countSamplesInRegion"] = {"count": 4}
        installed_store.replies["selectSamplesInRegion"] = {"samples": ["HG00096"]}
        assert handle_count_samples(REGION, config) == 4
        assert handle_select_samples(REGION, config) == ["HG00096"]

    @pytest.mark.unit
    def test_default_logged_as_warning(self, config, installed_store, caplog):
        with caplog.at_level(logging.WARNING, logger="dnaerys_mcp.core.tools"):
            assert handle_count_variants({**REGION, "chromosome": "23"}, config) == 0
        assert "count_variants returned its default" in caplog.text


class TestTrioHandler:
    @pytest.mark.unit
    @pytest.mark.parametrize("pattern", list(InheritancePattern))
    def test_role_arguments_per_pattern(self, config, installed_store, pattern):
        args = dict(zip(tools.TRIO_ARGS[pattern], ("P1", "P2", "C")), **REGION)
        handle_select_inheritance(args, config, pattern)
        request = installed_store.last_request
        assert installed_store.methods == [pattern.method]
        assert [request[f] for f in pattern.role_fields] == ["P1", "P2", "C"]

    @pytest.mark.unit
    def test_missing_role(self, config, installed_store):
        args = {"parent1": "P1", "proband": "C", **REGION}
        assert handle_select_inheritance(args, config, InheritancePattern.DE_NOVO) == [
            EMPTY_RESULT
        ]
        assert installed_store.calls == []


class TestDatasetHandlers:
    @pytest.mark.unit
    def test_kinship(self, config, installed_store):
        installed_store.replies["kinshipDuo"] = {"rel": [{"degree": "TWINS_MONOZYGOTIC"}]}
        assert handle_kinship({"sample1": "A", "sample2": "B"}, config) == "TWINS_MONOZYGOTIC"

    @pytest.mark.unit
    def test_dataset_info_failure_is_zeroed(self, config, installed_store):
        installed_store.failures["datasetInfo"] = "HTTP 500"
        assert handle_dataset_info({}, config) == {
            "variants_total": 0,
            "samples_total": 0,
            "females_total": 0,
            "males_total": 0,
            "nodes_total": 0,
        }

    @pytest.mark.unit
    def test_sample_ids_by_sex(self, config, installed_store):
        installed_store.replies["datasetInfo"] = {
            "cohorts": [{"femaleSamplesNames": ["F1"], "maleSamplesNames": ["M1"]}]
        }
        assert handle_sample_ids({"sex": "female"}, config) == ["F1"]
        assert handle_sample_ids({"sex": None}, config) == ["F1", "M1"]

    @pytest.mark.unit
    def test_sample_ids_unknown_sex(self, config, installed_store):
        assert handle_sample_ids({"sex": "unknown"}, config) == [EMPTY_RESULT]
        assert installed_store.calls == []
