"""Telnet input cleanup.

Telnet clients interleave option negotiation (``IAC <cmd> <option>``)
with user input. The board does not negotiate options, so these bytes
are dropped before a line is decoded.
"""

from __future__ import annotations

IAC = 0xFF
SB = 0xFA  # Subnegotiation begin
SE = 0xF0  # Subnegotiation end
# Commands followed by a one-byte option
WILL, WONT, DO, DONT = 0xFB, 0xFC, 0xFD, 0xFE


def clean_telnet_input(raw: bytes) -> str:
    """Strip telnet command sequences and decode as UTF-8.

    Undecodable bytes are ignored. An escaped ``IAC IAC`` yields a
    literal 0xFF byte, which UTF-8 decoding then drops.
    """
    out = bytearray()
    i = 0
    length = len(raw)
    while i < length:
        byte = raw[i]
        if byte != IAC:
            out.append(byte)
            i += 1
            continue
        if i + 1 >= length:
            break
        cmd = raw[i + 1]
        if cmd == IAC:
            out.append(IAC)
            i += 2
        elif cmd in (WILL, WONT, DO, DONT):
            i += 3
        elif cmd == SB:
            end = raw.find(bytes((IAC, SE)), i + 2)
            if end == -1:
                break
            i = end + 2
        else:
            i += 2
    return out.decode("utf-8", "ignore")
