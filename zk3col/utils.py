import hmac
import os
import re
from hashlib import sha3_256
from secrets import SystemRandom

NONCE_BYTES = 16

# Colour labels never contain the ':' separator used inside a commitment.
COLOUR_LABEL = re.compile(r'[A-Za-z0-9_-]+')


def is_colour_label(colour) -> bool:
    return isinstance(colour, str) and COLOUR_LABEL.fullmatch(colour) is not None


def generate_nonce() -> str:
    return os.urandom(NONCE_BYTES).hex()


def commit(colour: str, nonce: str) -> str:
    """
    Commit to a colour.

    Input: a colour label and a fresh hex nonce
    Output: hex SHA3-256 digest of "<colour>:<nonce>"
    """
    if not is_colour_label(colour):
        raise ValueError(f'invalid colour label: {colour!r}')
    h = sha3_256(f'{colour}:{nonce}'.encode('utf-8'))
    return h.hexdigest()


def verify_commitment(c: str, colour: str, nonce: str) -> bool:
    if not is_colour_label(colour):
        return False
    c_prime = commit(colour, nonce)
    return hmac.compare_digest(c_prime, c)


def generate_permutation(colours) -> dict:
    """
    Sample a uniformly random bijection on the given colour labels.

    The labels are shuffled with a CSPRNG and zipped positionally with
    the (sorted) original list.
    """
    labels = sorted(set(colours))
    shuffled = list(labels)
    SystemRandom().shuffle(shuffled)
    return dict(zip(labels, shuffled))
