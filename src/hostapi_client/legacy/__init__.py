"""
Legacy signed calling convention.

Parameters of legacy calls are signed in an order fixed by the remote
service's schema, so every encodable domain value declares its wire fields
explicitly.
"""

from hostapi_client.legacy.encoder import EncodableList, FieldSpec, encode_body, encode_params
from hostapi_client.legacy.models import (
    CronJob,
    Database,
    DnsEntries,
    DnsEntry,
    DnsSecEntries,
    DnsSecEntry,
    EntryType,
    KeyAlgorithm,
    KeyFlag,
    MailBox,
    MailForward,
    SpamCheckStrength,
    SubDomain,
)
from hostapi_client.legacy.params import ParameterList
from hostapi_client.legacy.soap import SoapClient, SoapRequest

__all__ = [
    "CronJob",
    "Database",
    "DnsEntries",
    "DnsEntry",
    "DnsSecEntries",
    "DnsSecEntry",
    "EncodableList",
    "EntryType",
    "FieldSpec",
    "KeyAlgorithm",
    "KeyFlag",
    "MailBox",
    "MailForward",
    "ParameterList",
    "SoapClient",
    "SoapRequest",
    "SpamCheckStrength",
    "SubDomain",
    "encode_body",
    "encode_params",
]
