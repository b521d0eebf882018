"""SRV resolution over a DNS-over-HTTPS JSON endpoint.

The JSON query format is the one served by Cloudflare and Google at their
/dns-query and /resolve endpoints. It is not standardised, so responses are
validated strictly before any record is used.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from social.graze.bsvalias.errors import DnsServerResponseError
from social.graze.bsvalias.resolve.srv import (
    RandomSource,
    SrvRecord,
    SrvResolver,
    SrvResolverResponse,
    normalize_target,
    query_name,
)
from social.graze.bsvalias.transport import Transport

logger = logging.getLogger(__name__)

DNS_JSON_MEDIA_TYPE = "application/dns-json"

STATUS_NOERROR = 0
STATUS_NXDOMAIN = 3

RECORD_TYPE_SRV = 33

DEFAULT_DOH_HOSTNAME = "cloudflare-dns.com"
DEFAULT_DOH_PATH = "/dns-query"

MAX_FIELD_VALUE = 0xFFFF

SRV_FIELD_PATTERN = re.compile(r"[0-9]+")


def _parse_srv_field(field: str, value: str) -> int:
    # int() alone also takes "+5", "1_0", padding and non-ASCII digits
    if SRV_FIELD_PATTERN.fullmatch(value) is None:
        raise DnsServerResponseError(
            f"Invalid {field}: value could not be converted to a number"
        )
    parsed = int(value)
    if parsed < 0 or parsed > MAX_FIELD_VALUE:
        raise DnsServerResponseError(f"Invalid {field}: value out of range")
    return parsed


def deserialize_srv_answer(answer: Dict[str, Any]) -> SrvRecord:
    """Parse the data of an SRV answer returned by a DoH endpoint.

    Args:
        answer: Answer entry with name, type, TTL and data fields

    Returns:
        The SRV record

    Raises:
        DnsServerResponseError: If data is not "<priority> <weight> <port> <target>"
    """
    data = answer.get("data")
    if not isinstance(data, str):
        raise DnsServerResponseError("Invalid answer")

    data_elements = data.split(" ")
    if len(data_elements) != 4:
        raise DnsServerResponseError("Invalid answer")

    priority = _parse_srv_field("priority", data_elements[0])
    weight = _parse_srv_field("weight", data_elements[1])
    port = _parse_srv_field("port", data_elements[2])

    ttl = answer.get("TTL")

    return SrvRecord(
        name=answer.get("name", ""),
        ttl=ttl if isinstance(ttl, int) else 0,
        priority=priority,
        weight=weight,
        port=port,
        target=normalize_target(data_elements[3].strip()),
    )


class DohSrvResolver(SrvResolver):
    """SRV-cognizant client as described in RFC 2782, over DNS-over-HTTPS."""

    def __init__(
        self,
        transport: Transport,
        random_source: Optional[RandomSource] = None,
        hostname: str = DEFAULT_DOH_HOSTNAME,
        path: str = DEFAULT_DOH_PATH,
    ) -> None:
        super().__init__(random_source)
        self._transport = transport
        self._hostname = hostname
        self._path = path

    def query_url(self, name: str) -> str:
        return f"https://{self._hostname}{self._path}?name={name}&type=SRV"

    async def locate_services(
        self, domain_name: str, service: str, protocol: str
    ) -> Optional[SrvResolverResponse]:
        name = query_name(domain_name, service, protocol)

        logger.debug(f"Querying SRV records for {name} via {self._hostname}")

        response = await self._transport.get(
            self.query_url(name),
            {
                "Accept": DNS_JSON_MEDIA_TYPE,
                "Content-Type": DNS_JSON_MEDIA_TYPE,
            },
        )

        if not isinstance(response, dict):
            raise DnsServerResponseError("Invalid DNS response")

        status = response.get("Status")

        if status == STATUS_NXDOMAIN:
            logger.debug(f"No SRV records for {name}: NXDOMAIN")
            return None

        if status != STATUS_NOERROR:
            raise DnsServerResponseError(
                f"Error response sent by the server (status {status})"
            )

        question = self._validate_question(response.get("Question"), name)

        answers = response.get("Answer")
        if not isinstance(answers, list):
            logger.debug(f"No SRV records for {name}: no answer section")
            return None

        records: List[SrvRecord] = [
            deserialize_srv_answer(answer)
            for answer in answers
            if isinstance(answer, dict)
            and answer.get("name") == question["name"]
            and answer.get("type") == question["type"]
        ]

        if len(records) == 0:
            raise DnsServerResponseError("No valid answer found")

        return self._build_response(records, response.get("AD") is True)

    def _validate_question(self, questions: Any, name: str) -> Dict[str, Any]:
        if not isinstance(questions, list):
            raise DnsServerResponseError("No `Question` field found")

        if len(questions) != 1:
            raise DnsServerResponseError("Expected only one `Question` element")

        question = questions[0]
        if not isinstance(question, dict):
            raise DnsServerResponseError("Invalid question name")

        if question.get("name") != name:
            raise DnsServerResponseError("Invalid question name")

        if question.get("type") != RECORD_TYPE_SRV:
            raise DnsServerResponseError("Invalid question type")

        return question
