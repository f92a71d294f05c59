"""Records returned by the EUVD API and their JSON mapping.

Decoding follows the API's loose JSON conventions. Unknown keys are ignored,
and missing keys keep the field's zero value. Keys match field names exactly
or, failing that, case-insensitively. A JSON ``null`` clears a list field and
leaves any other field untouched.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import field, fields, make_dataclass
from functools import lru_cache
from typing import Any, Callable, NamedTuple, TypeVar

__all__ = [
    "JsonModel",
    "ProductName",
    "VendorName",
    "EnisaProductInfo",
    "EnisaVendorInfo",
    "ExploitedVulnerability",
    "CriticalVulnerability",
    "VulnerabilityItem",
    "LatestVulnerability",
    "LastVulnerability",
    "VulnerabilityQueryResponse",
    "VulnerabilityByID",
    "ENISAVulnWrapper",
    "ENISAVulnerabilityByID",
    "ENISAAdvisoryWrapper",
    "ENISAVulnerability",
    "AdvisoryByID",
]

M = TypeVar("M", bound="JsonModel")
Decoder = Callable[[Any], Any]
FieldDef = tuple  # (attribute name, annotation, dataclasses.Field)


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, list):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def _decode_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    raise TypeError(f"cannot decode {_type_name(value)} into string")


def _decode_float(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raise TypeError(f"cannot decode {_type_name(value)} into number")


def _decode_int(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float):
        raise TypeError(f"cannot decode number {value!r} into integer")
    raise TypeError(f"cannot decode {_type_name(value)} into integer")


def _decode_any_list(value: Any) -> list[Any]:
    if isinstance(value, list):
        return list(value)
    raise TypeError(f"cannot decode {_type_name(value)} into array")


def _decode_model(cls: type[JsonModel]) -> Decoder:
    def decode(value: Any) -> JsonModel:
        return cls.from_dict(value)

    return decode


def _decode_model_list(cls: type[JsonModel]) -> Decoder:
    def decode(value: Any) -> list[JsonModel]:
        if not isinstance(value, list):
            raise TypeError(f"cannot decode {_type_name(value)} into array")
        return [cls.from_dict(item) for item in value]

    return decode


def _camel(attr: str) -> str:
    head, *rest = attr.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _json(
    attr: str,
    annotation: Any,
    key: str | None,
    decoder: Decoder,
    *,
    nullable: bool = False,
    **kwargs: Any,
) -> FieldDef:
    metadata = {"json": key or _camel(attr), "decoder": decoder, "nullable": nullable}
    return attr, annotation, field(metadata=metadata, **kwargs)


def _string(attr: str, key: str | None = None) -> FieldDef:
    return _json(attr, str, key, _decode_str, default="")


def _number(attr: str) -> FieldDef:
    return _json(attr, float, None, _decode_float, default=0.0)


def _integer(attr: str) -> FieldDef:
    return _json(attr, int, None, _decode_int, default=0)


def _any_list(attr: str) -> FieldDef:
    return _json(attr, list[Any] | None, None, _decode_any_list, nullable=True, default=None)


def _model(attr: str, cls: type[JsonModel]) -> FieldDef:
    return _json(attr, cls, None, _decode_model(cls), default_factory=cls)


def _model_list(attr: str, cls: type[JsonModel]) -> FieldDef:
    return _json(
        attr, list[cls] | None, None, _decode_model_list(cls), nullable=True, default=None
    )


class _FieldSpec(NamedTuple):
    attr: str
    key: str
    decoder: Decoder
    nullable: bool


@lru_cache(maxsize=None)
def _specs(
    cls: type,
) -> tuple[dict[str, _FieldSpec], dict[str, _FieldSpec], tuple[_FieldSpec, ...]]:
    ordered = tuple(
        _FieldSpec(f.name, f.metadata["json"], f.metadata["decoder"], f.metadata["nullable"])
        for f in fields(cls)
        if "json" in f.metadata
    )
    exact = {spec.key: spec for spec in ordered}
    folded: dict[str, _FieldSpec] = {}
    for spec in ordered:
        folded.setdefault(spec.key.casefold(), spec)
    return exact, folded, ordered


def _encode(value: Any) -> Any:
    if isinstance(value, JsonModel):
        return value.to_dict()
    if isinstance(value, list):
        return [_encode(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _encode(item) for key, item in value.items()}
    return value


class JsonModel:
    """Base for dataclasses that map to and from API JSON objects."""

    @classmethod
    def from_dict(cls: type[M], data: Any) -> M:
        """Build an instance from a decoded JSON object (``None`` gives defaults)."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise TypeError(f"cannot decode {_type_name(data)} into {cls.__name__}")
        exact, folded, _ = _specs(cls)
        values: dict[str, Any] = {}
        for key, raw in data.items():
            spec = exact.get(key) or folded.get(str(key).casefold())
            if spec is None:
                continue
            if raw is None:
                if spec.nullable:
                    values[spec.attr] = None
                continue
            try:
                values[spec.attr] = spec.decoder(raw)
            except TypeError as exc:
                raise TypeError(f"{cls.__name__}.{spec.key}: {exc}") from exc
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object for this record, keys in declaration order."""
        _, _, ordered = _specs(type(self))
        return {spec.key: _encode(getattr(self, spec.attr)) for spec in ordered}


def _record(name: str, doc: str, *field_defs: FieldDef) -> type[Any]:
    cls = make_dataclass(name, list(field_defs), bases=(JsonModel,), namespace={"__doc__": doc})
    cls.__module__ = __name__
    return cls


ProductName = _record("ProductName", "A product's name.", _string("name"))
VendorName = _record("VendorName", "A vendor's name.", _string("name"))

EnisaProductInfo = _record(
    "EnisaProductInfo",
    "A product affected by a vulnerability.",
    _string("id"),
    _model("product", ProductName),
    _string("product_version", "product_version"),
)

EnisaVendorInfo = _record(
    "EnisaVendorInfo",
    "A vendor affected by a vulnerability.",
    _string("id"),
    _model("vendor", VendorName),
)


def _summary_fields(*, products: bool = True, exploited: bool = False) -> list[FieldDef]:
    """Fields shared by the vulnerability summaries, in the API's order."""
    result = [_string("aliases"), _string("assigner"), _number("base_score")]
    result += [
        _string(attr)
        for attr in (
            "base_score_vector",
            "base_score_version",
            "date_published",
            "date_updated",
            "description",
        )
    ]
    if products:
        result.append(_model_list("enisa_id_product", EnisaProductInfo))
    result += [_model_list("enisa_id_vendor", EnisaVendorInfo), _number("epss")]
    if exploited:
        result.append(_string("exploited_since"))
    result += [_string("id"), _string("references")]
    return result


ExploitedVulnerability = _record(
    "ExploitedVulnerability",
    "A vulnerability known to be exploited.",
    *_summary_fields(exploited=True),
)
LastVulnerability = ExploitedVulnerability

CriticalVulnerability = _record(
    "CriticalVulnerability", "A vulnerability rated critical.", *_summary_fields()
)
VulnerabilityItem = _record(
    "VulnerabilityItem", "A vulnerability in a search result.", *_summary_fields()
)
LatestVulnerability = _record(
    "LatestVulnerability", "A recently published vulnerability.", *_summary_fields()
)

VulnerabilityQueryResponse = _record(
    "VulnerabilityQueryResponse",
    "A page of search results.",
    _model_list("items", VulnerabilityItem),
    _integer("total"),
)

VulnerabilityByID = _record(
    "VulnerabilityByID",
    "A vulnerability looked up by CVE identifier.",
    *[
        _string(attr)
        for attr in ("assigner",)
    ],
    _number("base_score"),
    *[_string(attr) for attr in ("date_published", "date_updated", "description")],
    _string("enisa_id", "enisa_id"),
    _number("epss"),
    *[_string(attr) for attr in ("id", "references", "status")],
    _any_list("vulnerability_advisory"),
    _model_list("vulnerability_product", EnisaProductInfo),
    _model_list("vulnerability_vendor", EnisaVendorInfo),
)

ENISAVulnWrapper = _record(
    "ENISAVulnWrapper",
    "A vulnerability linked to an ENISA record.",
    _string("id"),
    _model("vulnerability", VulnerabilityByID),
)

ENISAVulnerabilityByID = _record(
    "ENISAVulnerabilityByID",
    "A vulnerability looked up by ENISA identifier.",
    _string("aliases"),
    _string("assigner"),
    _number("base_score"),
    *[_string(attr) for attr in ("date_published", "date_updated", "description")],
    _any_list("enisa_id_advisory"),
    _model_list("enisa_id_product", EnisaProductInfo),
    _model_list("enisa_id_vendor", EnisaVendorInfo),
    _model_list("enisa_id_vulnerability", ENISAVulnWrapper),
    _number("epss"),
    _string("id"),
    _string("references"),
)

ENISAVulnerability = _record(
    "ENISAVulnerability",
    "An ENISA vulnerability record linked to an advisory.",
    *_summary_fields(products=False),
)

ENISAAdvisoryWrapper = _record(
    "ENISAAdvisoryWrapper",
    "An ENISA record linked to an advisory.",
    _string("id"),
    _model("enisa_id", ENISAVulnerability),
)

AdvisoryByID = _record(
    "AdvisoryByID",
    "An advisory looked up by its identifier.",
    _model_list("advisory_product", EnisaProductInfo),
    _string("aliases"),
    _number("base_score"),
    *[_string(attr) for attr in ("date_published", "date_updated", "description")],
    _model_list("enisa_id_advisories", ENISAAdvisoryWrapper),
)