"""Protocol constants for RCON packet handling.

These values are fixed by the servers speaking the protocol and must not
be changed independently of them.
"""

import struct

# Header format: little-endian uint32 (length) + int32 (id) + uint32 (kind)
HEADER_FORMAT = '<IiI'

# Size of the packet header in bytes
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)

# Size of the length field, which the length value itself does not count
LENGTH_FIELD_SIZE = 4

# Every packet ends with an empty payload terminator plus one pad byte
PACKET_PADDING = b'\x00\x00'

# id + kind + padding, added to the payload size to form the length field
LENGTH_OVERHEAD = 10

# Smallest possible frame: header plus padding with an empty payload
MIN_PACKET_SIZE = HEADER_SIZE + len(PACKET_PADDING)

# Payload of the termination packet sent after the first response fragment
TERMINATION_PAYLOAD = 'MESSAGE-END'

# What the server answers to the termination packet's unknown kind
TERMINAL_RESPONSE = 'Unknown request 5'

# Id the server puts on the login response when the password is wrong
AUTH_FAILURE_ID = -1

# Largest id that fits the signed 32-bit id field
MAX_PACKET_ID = 2 ** 31 - 1
MIN_PACKET_ID = -2 ** 31

# Address defaults
URL_SCHEME = 'rcon'
DEFAULT_PORT = 25575
