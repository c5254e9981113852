"""
Encoding of domain values for the legacy signed calling convention.

Every encodable type declares ``SOAP_TYPE`` and ``FIELDS``, an ordered tuple
of ``FieldSpec`` entries. The order of ``FIELDS`` is the order of the remote
service's published schema; both the signed parameter list and the XML body
are produced from it, so the two can never disagree.
"""

from dataclasses import dataclass
from enum import Enum
from operator import attrgetter
from typing import Any, Callable, Optional, Sequence
from xml.sax.saxutils import escape

from hostapi_client.legacy.params import EMPTY_COLLECTION_PARAM, ParameterList, format_param_value

XSD_STRING = "string"
XSD_INT = "int"
XSD_BOOLEAN = "boolean"


@dataclass(frozen=True)
class FieldSpec:
    """One wire field: its name, how to read it from a value, and its XSD type."""

    name: str
    accessor: Callable[[Any], Any]
    xsd_type: str = XSD_STRING

    @classmethod
    def attr(cls, name: str, attribute: str, xsd_type: str = XSD_STRING) -> "FieldSpec":
        return cls(name, attrgetter(attribute), xsd_type)

    def param_value(self, value: Any) -> str:
        return format_param_value(self.accessor(value))

    def body_value(self, value: Any) -> str:
        raw = self.accessor(value)
        if isinstance(raw, Enum):
            raw = raw.value
        if self.xsd_type == XSD_BOOLEAN:
            return "true" if raw else "false"
        if self.xsd_type == XSD_INT:
            return str(int(raw))
        return escape("" if raw is None else str(raw))

    def element(self, value: Any) -> str:
        return f'<{self.name} xsi:type="xsd:{self.xsd_type}">{self.body_value(value)}</{self.name}>'


class EncodableList(list):
    """List of encodable values of one type; encoded as a SOAP array."""

    item_type: Optional[type] = None

    @classmethod
    def array_type(cls) -> str:
        if cls.item_type is None:
            raise TypeError(f"{cls.__name__} does not declare an item_type")
        return cls.item_type.SOAP_TYPE


def _fields_of(value: Any) -> Sequence[FieldSpec]:
    fields = getattr(type(value), "FIELDS", None)
    if fields is None:
        raise TypeError(f"{type(value).__name__} cannot be encoded for the legacy API")
    return fields


def is_encodable(value: Any) -> bool:
    return isinstance(value, EncodableList) or hasattr(type(value), "FIELDS")


def encode_params(value: Any, prefix: str = "", params: Optional[ParameterList] = None) -> ParameterList:
    """Append the signature parameters of ``value`` to ``params``.

    Fields are named ``prefix[field]`` for a single value and
    ``prefix[index][field]`` for a collection. An empty prefix means the
    number of parameters already present. An empty collection adds a single
    ``anything`` placeholder.

    Returns:
        The parameter list that was appended to (a new one if none was given).
    """
    if params is None:
        params = ParameterList()

    if isinstance(value, EncodableList):
        if not value:
            params.set(EMPTY_COLLECTION_PARAM, "")
            return params
        if not prefix:
            prefix = str(len(params))
        for index, item in enumerate(value):
            for field in _fields_of(item):
                params.set(f"{prefix}[{index}][{field.name}]", field.param_value(item))
        return params

    fields = _fields_of(value)
    if not prefix:
        prefix = str(len(params))
    for field in fields:
        params.set(f"{prefix}[{field.name}]", field.param_value(value))
    return params


def encode_body(value: Any, key: str) -> str:
    """Render ``value`` as the typed XML argument named ``key``."""
    if isinstance(value, EncodableList):
        soap_type = type(value).array_type()
        lines = [
            f'<{key} SOAP-ENC:arrayType="ns1:{soap_type}[{len(value)}]" '
            f'xsi:type="ns1:ArrayOf{soap_type}">'
        ]
        for item in value:
            lines.append(f'\t<item xsi:type="ns1:{soap_type}">')
            lines.extend(f"\t\t{field.element(item)}" for field in _fields_of(item))
            lines.append("\t</item>")
        return "\n".join(lines) + f"\n</{key}>"

    lines = [f'<{key} xsi:type="ns1:{type(value).SOAP_TYPE}">']
    lines.extend(f"\t{field.element(value)}" for field in _fields_of(value))
    return "\n".join(lines) + f"\n</{key}>"
