"""
Domain values accepted by legacy signed calls.

Field order in ``FIELDS`` follows the remote service's WSDL and must not be
changed; server-side signature verification depends on it.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum

from hostapi_client.legacy.encoder import XSD_BOOLEAN, XSD_INT, EncodableList, FieldSpec


class EntryType(str, Enum):
    """DNS record types."""

    A = "A"
    AAAA = "AAAA"
    CNAME = "CNAME"
    MX = "MX"
    NS = "NS"
    TXT = "TXT"
    SRV = "SRV"


class KeyAlgorithm(IntEnum):
    """DNSSEC key algorithms (IANA numbers)."""

    DSA = 3
    RSASHA1 = 5
    DSANSEC3SHA1 = 6
    RSASHA1NSEC3SHA1 = 7
    RSASHA256 = 8
    RSASHA512 = 10
    ECCGOST = 12
    ECDSAP256SHA256 = 13
    ECDSAP384SHA384 = 14
    ED25519 = 15
    ED448 = 16


class KeyFlag(IntEnum):
    NONE = 0
    ZSK = 256
    KSK = 257


class SpamCheckStrength(str, Enum):
    AVERAGE = "AVERAGE"
    OFF = "OFF"
    LOW = "LOW"
    HIGH = "HIGH"


@dataclass(frozen=True)
class DnsEntry:
    """A single DNS record."""

    name: str
    expire: int
    entry_type: EntryType
    content: str

    SOAP_TYPE = "DnsEntry"
    FIELDS = (
        FieldSpec.attr("name", "name"),
        FieldSpec.attr("expire", "expire", XSD_INT),
        FieldSpec.attr("type", "entry_type"),
        FieldSpec.attr("content", "content"),
    )


class DnsEntries(EncodableList):
    item_type = DnsEntry


@dataclass(frozen=True)
class DnsSecEntry:
    """A DNSSEC key published for a domain."""

    key_tag: int
    flags: KeyFlag
    algorithm: KeyAlgorithm
    public_key: str

    SOAP_TYPE = "DnsSecEntry"
    FIELDS = (
        FieldSpec.attr("keyTag", "key_tag", XSD_INT),
        FieldSpec.attr("flags", "flags", XSD_INT),
        FieldSpec.attr("algorithm", "algorithm", XSD_INT),
        FieldSpec.attr("publicKey", "public_key"),
    )


class DnsSecEntries(EncodableList):
    item_type = DnsSecEntry


@dataclass(frozen=True)
class MailBox:
    address: str
    spam_checker_strength: SpamCheckStrength = SpamCheckStrength.AVERAGE
    max_disk_usage: int = 0
    has_vacation_reply: bool = False
    vacation_reply_subject: str = ""
    vacation_reply_message: str = ""

    SOAP_TYPE = "MailBox"
    FIELDS = (
        FieldSpec.attr("address", "address"),
        FieldSpec.attr("spamCheckerStrength", "spam_checker_strength"),
        FieldSpec.attr("maxDiskUsage", "max_disk_usage", XSD_INT),
        FieldSpec.attr("hasVacationReply", "has_vacation_reply", XSD_BOOLEAN),
        FieldSpec.attr("vacationReplySubject", "vacation_reply_subject"),
        FieldSpec.attr("vacationReplyMessage", "vacation_reply_message"),
    )


@dataclass(frozen=True)
class SubDomain:
    name: str

    SOAP_TYPE = "SubDomain"
    FIELDS = (FieldSpec.attr("name", "name"),)


@dataclass(frozen=True)
class MailForward:
    name: str
    target_address: str

    SOAP_TYPE = "MailForward"
    FIELDS = (
        FieldSpec.attr("name", "name"),
        FieldSpec.attr("targetAddress", "target_address"),
    )


@dataclass(frozen=True)
class Database:
    """A webhosting database; the service calls the type ``Db``."""

    name: str
    username: str
    max_disk_usage: int = 0

    SOAP_TYPE = "Db"
    FIELDS = (
        FieldSpec.attr("name", "name"),
        FieldSpec.attr("username", "username"),
        FieldSpec.attr("maxDiskUsage", "max_disk_usage", XSD_INT),
    )


@dataclass(frozen=True)
class CronJob:
    """A scheduled URL fetch. Triggers use crontab syntax."""

    name: str
    url: str
    email: str
    minute_trigger: str = "*"
    hour_trigger: str = "*"
    day_trigger: str = "*"
    month_trigger: str = "*"
    weekday_trigger: str = "*"

    SOAP_TYPE = "Cronjob"
    FIELDS = (
        FieldSpec.attr("name", "name"),
        FieldSpec.attr("url", "url"),
        FieldSpec.attr("email", "email"),
        FieldSpec.attr("minuteTrigger", "minute_trigger"),
        FieldSpec.attr("hourTrigger", "hour_trigger"),
        FieldSpec.attr("dayTrigger", "day_trigger"),
        FieldSpec.attr("monthTrigger", "month_trigger"),
        FieldSpec.attr("weekdayTrigger", "weekday_trigger"),
    )
