# config.py

import os

NODE_ID_MIN = 0
NODE_ID_MAX = 9999

PRIVATE_KEY_LENGTH = 128
PUBLIC_KEY_LENGTH = 64
PASSCODE_LENGTH = 8

PORT_MIN = 1
PORT_MAX = 65535

MTU_MIN = 68
MTU_MAX = 9200

CRYPTO_MODES = ("xor", "arc4", "none")
NODE_TYPE_TAGS = ("n", "i", "u", "r", "s", "f")

MULTISOCKET_TOKENS = ("0", "1", "true", "false")
ROUTE_SUBNET_TOKENS = ("0", "1")
DISABLED_TRUE_TOKENS = ("1", "true", "yes", "on")

EXPORT_FILENAME = "gnb-node-{node_id}.conf"
PEER_SECTION_PREFIX = "gnb_"
DEVICE_NAME = "gnb-{section_id}"

QR_BOX_SIZE = 10
QR_BORDER = 4
QR_FILENAME = "gnb-node-{node_id}.png"
PEERS_QR_FILENAME = "gnb-peers-{node_ids}.png"

LOG_LEVEL = os.environ.get("GNB_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(levelname)s %(message)s"
