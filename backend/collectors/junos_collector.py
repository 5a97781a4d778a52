"""
Junos Collector — Retrieve DHCP address-assignment pools via pexpect.

Two transports, selected by the router's apply-method:
- netconf: `ssh -s netconf` on port 830, NETCONF 1.0 framing (]]>]]>)
- telnet:  CLI login, `show configuration ... | display xml`

Both return configuration XML that parsers.junos_netconf understands.
"""

import logging

from models import ApplyMethod, PoolDeviceConfig
from parsers.junos_netconf import GET_POOLS_RPC, parse_address_pools

logger = logging.getLogger(__name__)

NETCONF_PORT = 830
NETCONF_EOM = "]]>]]>"

CLIENT_HELLO = (
    '<hello xmlns="urn:ietf:params:xml:ns:netconf:base:1.0">'
    "<capabilities>"
    "<capability>urn:ietf:params:netconf:base:1.0</capability>"
    "</capabilities>"
    "</hello>"
)

SHOW_POOLS_CMD = "show configuration access address-assignment | display xml | no-more"


class JunosPoolCollector:
    """Collect pool configuration from one Junos router."""

    def __init__(self, host: str, username: str = "", password: str = "",
                 method: ApplyMethod = ApplyMethod.NETCONF, port: int = NETCONF_PORT):
        self.host = host
        self.username = username
        self.password = password
        self.method = method
        self.port = port

    async def get_pools(self) -> dict[str, PoolDeviceConfig]:
        """Fetch and parse every inet pool configured on the device."""
        try:
            if self.method == ApplyMethod.NETCONF:
                xml = self._fetch_netconf()
            else:
                xml = self._fetch_telnet()
        except Exception as e:
            logger.error(f"[{self.host}] pool retrieval failed: {e}")
            raise

        pools = parse_address_pools(xml, self.host)
        logger.info(f"[{self.host}] {len(pools)} pools retrieved")
        return pools

    def _fetch_netconf(self) -> str:
        import pexpect

        child = pexpect.spawn(
            "ssh",
            ["-p", str(self.port), "-o", "StrictHostKeyChecking=no",
             "-o", "PreferredAuthentications=password",
             "-s", f"{self.username}@{self.host}", "netconf"],
            timeout=60,
            maxread=2000000,
            encoding="utf-8",
        )
        child.expect("[Pp]assword:", timeout=30)
        child.sendline(self.password)

        # Server hello, then ours
        child.expect_exact(NETCONF_EOM, timeout=30)
        child.send(CLIENT_HELLO + NETCONF_EOM)

        child.send(GET_POOLS_RPC + NETCONF_EOM)
        child.expect_exact(NETCONF_EOM, timeout=180)
        output = child.before

        child.send("<rpc><close-session/></rpc>" + NETCONF_EOM)
        child.close()
        return output

    def _fetch_telnet(self) -> str:
        import pexpect

        prompt = r'[^\s]+>'

        child = pexpect.spawn(
            f'telnet {self.host}',
            timeout=60,
            maxread=2000000,
            encoding='utf-8',
        )
        child.expect('login:', timeout=30)
        child.sendline(self.username)
        child.expect('Password:', timeout=10)
        child.sendline(self.password)
        child.expect(prompt, timeout=30)

        child.sendline('set cli screen-length 0')
        child.expect(prompt, timeout=10)

        child.sendline(SHOW_POOLS_CMD)
        child.expect(prompt, timeout=180)
        output = child.before

        child.sendline('exit')
        child.close()
        return output
