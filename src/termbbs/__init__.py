"""termbbs -- A line-oriented multi-user bulletin board service.

Users connect over a raw text stream (telnet, netcat), register, log in,
post and read messages. Each connection is driven by a Session state
machine that dispatches free-text input to pluggable commands, which in
turn mutate a shared, lock-guarded store of users and messages.
"""

__version__ = "0.1.0"
