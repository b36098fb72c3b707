"""Wire messages: one JSON object per line, discriminated by its "type" field."""

from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .errors import ProtocolDecodeError
from .utils import COLOUR_LABEL

Round = Annotated[int, Field(ge=0)]
Vertex = Annotated[int, Field(ge=0)]
Colour = Annotated[str, Field(pattern=f'^{COLOUR_LABEL.pattern}$')]
Nonce = Annotated[str, Field(pattern=r'^[0-9a-f]{32}$')]
Digest = Annotated[str, Field(pattern=r'^[0-9a-f]{64}$')]


class Message(BaseModel):
    model_config = ConfigDict(strict=True, frozen=True)


class Commit(Message):
    """Prover -> verifier: one commitment per vertex, indexed by vertex id."""
    type: Literal['COMMIT'] = 'COMMIT'
    round: Round
    commitments: List[Digest]


class Challenge(Message):
    """Verifier -> prover: open the commitments of the two endpoints of an edge."""
    type: Literal['CHALLENGE'] = 'CHALLENGE'
    round: Round
    vertex1: Vertex
    vertex2: Vertex


class Reveal(Message):
    """Prover -> verifier: permuted colours and nonces of the challenged vertices."""
    type: Literal['REVEAL'] = 'REVEAL'
    round: Round
    colour1: Colour
    colour2: Colour
    nonce1: Nonce
    nonce2: Nonce


class Result(Message):
    """Verifier -> prover: final verdict of the session."""
    type: Literal['RESULT'] = 'RESULT'
    verified: bool
    message: str
    totalRounds: Round


ProtocolMessage = Annotated[Union[Commit, Challenge, Reveal, Result], Field(discriminator='type')]

_adapter = TypeAdapter(ProtocolMessage)


def encode_message(msg: Message) -> bytes:
    return msg.model_dump_json().encode('utf-8')


def decode_message(data: bytes) -> Message:
    """
    Parse a single wire message.

    Raises ProtocolDecodeError for invalid UTF-8 or JSON, an unknown
    "type", and missing or mistyped fields.
    """
    try:
        text = data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise ProtocolDecodeError('message is not valid UTF-8') from e
    try:
        return _adapter.validate_json(text)
    except ValidationError as e:
        raise ProtocolDecodeError(f'malformed message: {e.errors(include_url=False)}') from e
