import json

import pytest

from euvdlookup.models import (
    AdvisoryByID,
    CriticalVulnerability,
    ENISAVulnerabilityByID,
    EnisaProductInfo,
    ExploitedVulnerability,
    LastVulnerability,
    LatestVulnerability,
    VulnerabilityByID,
    VulnerabilityQueryResponse,
)


def _product(pid="p-1", name="Widget", version="1.0"):
    return {"id": pid, "product": {"name": name}, "product_version": version}


def _vendor(vid="v-1", name="Acme"):
    return {"id": vid, "vendor": {"name": name}}


def _latest_payload():
    return {
        "aliases": "CVE-2024-0864",
        "assigner": "acme",
        "baseScore": 7.5,
        "baseScoreVector": "AV:N/AC:L",
        "baseScoreVersion": "3.1",
        "datePublished": "2024-01-01",
        "dateUpdated": "2024-01-02",
        "description": "An issue.",
        "enisaIdProduct": [_product()],
        "enisaIdVendor": [_vendor()],
        "epss": 0.25,
        "id": "EUVD-2024-45012",
        "references": "ref",
    }


def test_latest_round_trip():
    payload = _latest_payload()
    vuln = LatestVulnerability.from_dict(payload)
    assert vuln.base_score == 7.5
    assert vuln.enisa_id_product[0].product.name == "Widget"
    assert vuln.enisa_id_vendor[0].vendor.name == "Acme"
    assert vuln.to_dict() == payload


def test_to_dict_key_order_follows_declaration():
    keys = list(CriticalVulnerability().to_dict())
    assert keys[0] == "aliases"
    assert keys[-1] == "references"
    assert "baseScoreVector" in keys


def test_missing_keys_take_zero_values():
    vuln = ExploitedVulnerability.from_dict({"id": "EUVD-2024-45012"})
    assert vuln.id == "EUVD-2024-45012"
    assert vuln == ExploitedVulnerability(id="EUVD-2024-45012")
    assert vuln.to_dict()["enisaIdProduct"] is None


def test_unknown_keys_ignored():
    vuln = LatestVulnerability.from_dict({"id": "x", "somethingElse": 12})
    assert vuln == LatestVulnerability(id="x")


def test_case_insensitive_key_match():
    vuln = LatestVulnerability.from_dict({"BASESCORE": 9.8, "Id": "abc"})
    assert vuln.base_score == 9.8
    assert vuln.id == "abc"


def test_exact_match_preferred_and_last_key_wins():
    vuln = LatestVulnerability.from_dict({"ID": "first", "id": "second"})
    assert vuln.id == "second"


def test_null_clears_list_but_keeps_scalars():
    vuln = LatestVulnerability.from_dict(
        {"enisaIdProduct": [_product()], "description": "kept"}
    )
    again = LatestVulnerability.from_dict(
        {"enisaIdProduct": [_product()], "description": "kept", "epss": None}
    )
    assert again == vuln
    cleared = LatestVulnerability.from_dict(
        {"enisaIdProduct": [_product()], "enisaIdProduct_": 1, "enisaidproduct": None}
    )
    assert cleared.enisa_id_product is None


def test_null_element_in_model_list_gives_zero_record():
    vuln = LatestVulnerability.from_dict({"enisaIdProduct": [None]})
    assert vuln.enisa_id_product == [EnisaProductInfo()]


def test_from_dict_none_gives_defaults():
    assert VulnerabilityByID.from_dict(None) == VulnerabilityByID()


def test_integer_score_accepted_as_float():
    vuln = LatestVulnerability.from_dict({"baseScore": 9})
    assert vuln.base_score == 9.0
    assert isinstance(vuln.base_score, float)


@pytest.mark.parametrize(
    "cls, payload",
    [
        (LatestVulnerability, {"baseScore": "high"}),
        (LatestVulnerability, {"baseScore": True}),
        (LatestVulnerability, {"id": 5}),
        (LatestVulnerability, {"enisaIdProduct": {"id": "x"}}),
        (LatestVulnerability, {"enisaIdProduct": [{"product": "Widget"}]}),
        (VulnerabilityQueryResponse, {"total": 1.5}),
        (VulnerabilityQueryResponse, {"total": "3"}),
        (VulnerabilityByID, {"vulnerabilityAdvisory": "none"}),
    ],
)
def test_type_mismatch_raises(cls, payload):
    with pytest.raises(TypeError):
        cls.from_dict(payload)


def test_non_object_raises():
    with pytest.raises(TypeError):
        LatestVulnerability.from_dict([1, 2])


def test_query_response_round_trip():
    payload = {"items": [_latest_payload()], "total": 1}
    response = VulnerabilityQueryResponse.from_dict(payload)
    assert response.total == 1
    assert response.items[0].id == "EUVD-2024-45012"
    assert response.to_dict() == payload


def test_vulnerability_by_id_keys_and_advisory_list():
    payload = {
        "id": "CVE-2024-0864",
        "enisa_id": "EUVD-2024-45012",
        "status": "PUBLISHED",
        "vulnerabilityAdvisory": [],
        "vulnerabilityProduct": [_product()],
        "vulnerabilityVendor": [_vendor()],
    }
    vuln = VulnerabilityByID.from_dict(payload)
    assert vuln.enisa_id == "EUVD-2024-45012"
    assert vuln.vulnerability_advisory == []
    encoded = vuln.to_dict()
    assert {k: encoded[k] for k in payload} == payload


def test_enisa_vulnerability_nested_wrappers():
    payload = {
        "id": "EUVD-2024-45012",
        "enisaIdAdvisory": [{"anything": 1}],
        "enisaIdVulnerability": [
            {"id": "w-1", "vulnerability": {"id": "CVE-2024-0864", "baseScore": 5.0}}
        ],
    }
    record = ENISAVulnerabilityByID.from_dict(payload)
    wrapper = record.enisa_id_vulnerability[0]
    assert wrapper.vulnerability.id == "CVE-2024-0864"
    assert wrapper.vulnerability.base_score == 5.0
    assert record.enisa_id_advisory == [{"anything": 1}]
    assert ENISAVulnerabilityByID.from_dict(record.to_dict()) == record


def test_advisory_round_trip_through_json_text():
    payload = {
        "advisoryProduct": [_product()],
        "aliases": "a",
        "baseScore": 4.3,
        "datePublished": "2024-03-01",
        "dateUpdated": "2024-03-02",
        "description": "adv",
        "enisaIdAdvisories": [
            {
                "id": "x-1",
                "enisaId": {"id": "EUVD-2024-45012", "enisaIdVendor": [_vendor()]},
            }
        ],
    }
    advisory = AdvisoryByID.from_dict(payload)
    assert advisory.enisa_id_advisories[0].enisa_id.enisa_id_vendor[0].vendor.name == "Acme"
    text = json.dumps(advisory.to_dict())
    assert AdvisoryByID.from_dict(json.loads(text)) == advisory


def test_exploited_has_exploited_since_and_alias():
    vuln = LastVulnerability.from_dict({"exploitedSince": "2024-05-05"})
    assert isinstance(vuln, ExploitedVulnerability)
    assert vuln.exploited_since == "2024-05-05"
    assert "exploitedSince" in vuln.to_dict()
    assert "exploitedSince" not in CriticalVulnerability().to_dict()