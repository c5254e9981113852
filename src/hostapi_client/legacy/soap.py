"""
Legacy SOAP calls signed with the account's private key.

Legacy calls do not use bearer tokens. Instead every request carries the
account name, a timestamp, a nonce and a signature over the ordered request
parameters in cookies.
"""

import ipaddress
import time
import xml.etree.ElementTree as ET
from enum import Enum
from typing import Any, List, Optional, Sequence
from xml.sax.saxutils import escape

import requests

from hostapi_client.auth.signer import Signer
from hostapi_client.auth.token_request import TokenRequestBuilder
from hostapi_client.errors import ConfigurationError, LegacyAPIError
from hostapi_client.legacy.encoder import encode_body, encode_params, is_encodable
from hostapi_client.legacy.params import ParameterList
from hostapi_client.security.secret_store import PrivateKeyHandle
from hostapi_client.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_SOAP_HOSTNAME = "api.transip.nl"
MODE_READONLY = "readonly"
MODE_READWRITE = "readwrite"

SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"

ENVELOPE_TEMPLATE = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    f'<SOAP-ENV:Envelope xmlns:SOAP-ENV="{SOAP_ENV_NS}" xmlns:ns1="api.transip.nl">\n'
    "\t<SOAP-ENV:Body><ns1:{method}>{arguments}</ns1:{method}></SOAP-ENV:Body>\n"
    "</SOAP-ENV:Envelope>"
)


class SoapRequest:
    """A single legacy method call.

    Each argument is recorded twice: as positional signature parameters and
    as a typed XML element of the request body.
    """

    def __init__(self, service: str, method: str):
        self.service = service
        self.method = method
        self.params = ParameterList()
        self._arguments: List[str] = []

    def add_argument(self, name: str, value: Any) -> None:
        """Add an argument to the call.

        Supported values are strings, integers, booleans, enum members, IP
        addresses, lists of strings and encodable domain values.

        Raises:
            TypeError: For any other value.
        """
        position = str(len(self.params))
        if isinstance(value, Enum):
            value = value.value

        if is_encodable(value):
            encode_params(value, params=self.params)
            self._arguments.append(encode_body(value, name))
        elif isinstance(value, bool):
            self.params.add(position, value)
            self._arguments.append(f'<{name} xsi:type="xsd:boolean">{"true" if value else "false"}</{name}>')
        elif isinstance(value, int):
            self.params.add(position, value)
            self._arguments.append(f'<{name} xsi:type="xsd:integer">{value}</{name}>')
        elif isinstance(value, (str, ipaddress.IPv4Address, ipaddress.IPv6Address)):
            self.params.add(position, value)
            self._arguments.append(f'<{name} xsi:type="xsd:string">{escape(str(value))}</{name}>')
        elif isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
            self.params.set_multi(position, value)
            self._arguments.append(self._string_array(name, value))
        else:
            raise TypeError(f"unsupported argument type {type(value).__name__} for {name!r}")

    @staticmethod
    def _string_array(name: str, values: Sequence[str]) -> str:
        items = "".join(f'<item xsi:type="xsd:string">{escape(v)}</item>' for v in values)
        return (
            f'<{name} SOAP-ENC:arrayType="xsd:string[{len(values)}]" '
            f'xsi:type="ns1:ArrayOfString">{items}</{name}>'
        )

    def get_envelope(self) -> str:
        return ENVELOPE_TEMPLATE.format(method=self.method, arguments="".join(self._arguments))


def parse_soap_response(content: bytes, status_code: int) -> Optional[ET.Element]:
    """Return the ``return`` element of a SOAP response.

    Raises:
        LegacyAPIError: For SOAP faults, unparsable bodies and unexpected
            status codes.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise LegacyAPIError(f"could not parse SOAP response: {e}") from e

    body = root.find(f"{{{SOAP_ENV_NS}}}Body")
    if body is None:
        raise LegacyAPIError("SOAP response has no body")

    fault = body.find(f"{{{SOAP_ENV_NS}}}Fault")
    if fault is not None:
        code = fault.findtext("faultcode", default="")
        message = fault.findtext("faultstring", default="")
        raise LegacyAPIError(f"SOAP Fault {code}: {message}", fault_code=code)

    if status_code != 200:
        raise LegacyAPIError(f"unexpected status code {status_code} from SOAP endpoint")

    method_response = next(iter(body), None)
    if method_response is None:
        return None
    return method_response.find("return")


class SoapClient:
    """Send signed legacy requests.

    Args:
        login: Account name.
        private_key: Key used to sign every request.
        mode: ``readonly`` or ``readwrite``.
        hostname: SOAP API host.
        session: HTTP executor.
        signer: Signer for request parameters.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        login: str,
        private_key: Optional[PrivateKeyHandle],
        mode: str = MODE_READWRITE,
        hostname: str = DEFAULT_SOAP_HOSTNAME,
        session: Optional[requests.Session] = None,
        signer: Optional[Signer] = None,
        timeout: Optional[float] = 30,
    ):
        if not login:
            raise ConfigurationError("account name is required for legacy calls")
        if mode not in (MODE_READONLY, MODE_READWRITE):
            raise ConfigurationError(f"invalid mode {mode!r}, expected readonly or readwrite")

        self.login = login
        self.mode = mode
        self.hostname = hostname
        self.session = session or requests.Session()
        self.signer = signer or Signer()
        self.timeout = timeout
        self._private_key = private_key

    def url_for(self, service: str) -> str:
        return f"https://{self.hostname}/soap/?service={service}"

    def sign(self, request: SoapRequest, timestamp: int, nonce: str) -> str:
        """Sign the request parameters extended with the call metadata."""
        params = request.params.copy()
        params.set("__method", request.method)
        params.set("__service", request.service)
        params.set("__hostname", self.hostname)
        params.add("__timestamp", timestamp)
        params.set("__nonce", nonce)
        return self.signer.sign_encoded(params.encode().encode("utf-8"), self._private_key)

    def prepare(self, request: SoapRequest, now: Optional[float] = None) -> requests.PreparedRequest:
        """Build the HTTP request for ``request`` including authentication cookies."""
        timestamp = int(now if now is not None else time.time())
        nonce = TokenRequestBuilder.new_nonce()

        cookies = {
            "login": self.login,
            "mode": self.mode,
            "timestamp": str(timestamp),
            "nonce": nonce,
            "signature": self.sign(request, timestamp, nonce),
        }
        http_request = requests.Request(
            "POST",
            self.url_for(request.service),
            data=request.get_envelope().encode("utf-8"),
            headers={"Content-Type": "text/xml; charset=utf-8"},
            cookies=cookies,
        )
        return http_request.prepare()

    def call(self, request: SoapRequest) -> Optional[ET.Element]:
        """Send ``request`` and return the ``return`` element of the response.

        Raises:
            LegacyAPIError: On transport errors and SOAP faults.
            SigningError: If the private key cannot sign the request.
        """
        prepared = self.prepare(request)
        logger.info("Calling legacy API", service=request.service, method=request.method)

        try:
            response = self.session.send(prepared, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Legacy API request failed", service=request.service, error=str(e))
            raise LegacyAPIError(f"request error: {e}") from e

        return parse_soap_response(response.content, response.status_code)
