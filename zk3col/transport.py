import logging
import socket

from .errors import ProtocolDecodeError, TransportError
from .messages import Message, decode_message, encode_message

logger = logging.getLogger(__name__)

# Upper bound on one framed message; a commitment line grows with the graph.
MAX_LINE = 0x400000

# How long a finished session waits for the peer to hang up.
LINGER_TIMEOUT = 5


class LineTransport:
    """
    Newline-delimited send/receive over an established duplex stream.

    `rfile`/`wfile` are binary file objects, like the ones a
    `socketserver.StreamRequestHandler` hands out.
    """

    def __init__(self, rfile, wfile, sock=None):
        self.rfile = rfile
        self.wfile = wfile
        self.sock = sock

    @classmethod
    def from_socket(cls, sock: socket.socket, timeout=None) -> 'LineTransport':
        sock.settimeout(timeout)
        return cls(sock.makefile('rb'), sock.makefile('wb'), sock)

    def send_line(self, data: bytes):
        if b'\n' in data:
            raise ValueError('a line must not contain a newline')
        try:
            self.wfile.write(data)
            self.wfile.write(b'\n')
            self.wfile.flush()
        except (OSError, ValueError) as e:
            raise TransportError(f'send failed: {e}') from e

    def receive_line(self) -> bytes:
        try:
            line = self.rfile.readline(MAX_LINE + 1)
        except socket.timeout as e:
            raise TransportError('timed out waiting for peer') from e
        except (OSError, ValueError) as e:
            raise TransportError(f'receive failed: {e}') from e
        if not line:
            raise TransportError('connection closed')
        if not line.endswith(b'\n'):
            if len(line) > MAX_LINE:
                raise ProtocolDecodeError(f'line exceeds {MAX_LINE} bytes')
            raise TransportError('connection closed in the middle of a message')
        return line[:-1]

    def send_message(self, msg: Message):
        logger.debug('-> %s', msg.type)
        self.send_line(encode_message(msg))

    def receive_message(self) -> Message:
        msg = decode_message(self.receive_line())
        logger.debug('<- %s', msg.type)
        return msg

    def linger(self, timeout=LINGER_TIMEOUT):
        """
        Half-close the stream and discard whatever the peer still sends,
        until it closes its end or `timeout` expires.

        Lets the peer finish a write already in flight and read our last
        message, instead of being reset.
        """
        if self.sock is None:
            return
        try:
            self.wfile.flush()
            self.sock.shutdown(socket.SHUT_WR)
            self.sock.settimeout(timeout)
            while self.sock.recv(4096):
                pass
        except (OSError, ValueError):
            logger.debug('stopped draining the stream', exc_info=True)

    def close(self):
        for f in (self.wfile, self.rfile):
            try:
                f.close()
            except OSError:
                logger.debug('error while closing stream', exc_info=True)
        if self.sock is not None:
            self.sock.close()
