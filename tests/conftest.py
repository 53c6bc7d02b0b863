import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

# Test data
PRIVATE_KEY = "0123456789abcdef" * 8
PUBLIC_KEY = "fedcba9876543210" * 4
PEER_PUBLIC_KEY = "00112233445566778899aabbccddeeff" * 2

SAMPLE_CONF = f"""\
[Interface]
NodeID=10
PrivateKey={PRIVATE_KEY}
PublicKey={PUBLIC_KEY}
IPAddr=192.168.100.1/24
PassCode=deadbeef
Crypto=none

[Peer]
NodeID=11
PublicKey={PEER_PUBLIC_KEY}
IPAddr=192.168.100.2/24
"""


@pytest.fixture
def sample_conf():
    return SAMPLE_CONF


@pytest.fixture
def conf_file(tmp_path):
    path = tmp_path / "gnb1010.conf"
    path.write_text(SAMPLE_CONF)
    return path
