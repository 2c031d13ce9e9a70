"""
Deterministic Constant-Derivation Transcript

A single-use, domain-separated generator of field elements:

    INITIALIZED --absorb/domain_sep--> SEEDED --derive--> GENERATING --finish--> COMPLETE

Every absorb is framed as TAG(2) || len(8) || data. Outputs are 64-byte
SHAKE256 squeezes over the running transcript and a counter, reduced mod p;
each output is folded back into the transcript.

Absorbing after the first output is rejected, so all domain separation
happens before any constant is produced.
"""

from enum import Enum
from typing import Optional, Type
import hashlib

from .field import FieldElement, Fq
from .input import Alpha, InputParameters, RoundNumbers
from .tags import ParamgenTag, PARAMGEN_DOMAIN, ROUND_CONSTANTS_LABEL, tag_bytes


# Bytes squeezed per field element (twice the modulus size keeps the bias negligible)
SQUEEZE_BYTES = 64


class TranscriptState(Enum):
    INITIALIZED = 'initialized'
    SEEDED = 'seeded'
    GENERATING = 'generating'
    COMPLETE = 'complete'


class Transcript:
    """
    Fiat-Shamir style transcript for deriving round constants.

    Not reentrant: create one per derivation and call finish() when done.
    """

    def __init__(self, label: bytes = ROUND_CONSTANTS_LABEL):
        self._hasher = hashlib.shake_256()
        self._counter = 0
        self._field: Type[FieldElement] = Fq
        self.state = TranscriptState.INITIALIZED
        self._append(ParamgenTag.PROTOCOL, label)

    def _append(self, tag: ParamgenTag, data: bytes):
        self._hasher.update(tag_bytes(tag))
        self._hasher.update(len(data).to_bytes(8, 'big'))
        self._hasher.update(data)

    def _check_live(self):
        if self.state is TranscriptState.COMPLETE:
            raise RuntimeError("Transcript already finished")

    def absorb(self, data: bytes, tag: ParamgenTag = ParamgenTag.MESSAGE):
        """Add tagged data to the transcript."""
        self._check_live()
        if self.state is TranscriptState.GENERATING:
            raise RuntimeError("Cannot absorb after squeezing")
        self._append(tag, bytes(data))
        self.state = TranscriptState.SEEDED

    def domain_sep(
        self,
        input: InputParameters,
        round_numbers: RoundNumbers,
        alpha: Alpha,
    ):
        """
        Bind the transcript to one exact instance.

        Absorbs, in this order: parameter-generation identifier, security
        level, width, modulus, inverse flag, full rounds, partial rounds,
        alpha. Outputs are reduced into input.field afterwards.
        """
        # Order follows the reference paramgen transcript: security level first
        self.absorb(PARAMGEN_DOMAIN, ParamgenTag.DOMAIN_SEP)
        self.absorb(input.security_level.to_bytes(8, 'big'), ParamgenTag.SECURITY_LEVEL)
        self.absorb(input.t.to_bytes(8, 'big'), ParamgenTag.WIDTH)
        self.absorb(input.modulus_bytes(), ParamgenTag.MODULUS)
        self.absorb(bytes([input.allow_inverse]), ParamgenTag.ALLOW_INVERSE)
        self.absorb(round_numbers.full.to_bytes(8, 'big'), ParamgenTag.FULL_ROUNDS)
        self.absorb(round_numbers.partial.to_bytes(8, 'big'), ParamgenTag.PARTIAL_ROUNDS)
        self.absorb(alpha.to_bytes(), ParamgenTag.ALPHA)
        self._field = input.field

    def derive_field_element(self, field: Optional[Type[FieldElement]] = None) -> FieldElement:
        """Squeeze the next field element."""
        self._check_live()
        if self.state is TranscriptState.INITIALIZED:
            raise RuntimeError("Transcript must be seeded before deriving output")

        h = self._hasher.copy()
        h.update(tag_bytes(ParamgenTag.ROUND_CONSTANT))
        h.update(self._counter.to_bytes(8, 'big'))
        digest = h.digest(SQUEEZE_BYTES)

        self._counter += 1
        self._hasher.update(digest)  # Include in future outputs
        self.state = TranscriptState.GENERATING
        return (field or self._field).from_bytes_mod_order(digest)

    def finish(self):
        """Discard the transcript; further use raises RuntimeError."""
        self.state = TranscriptState.COMPLETE
        self._hasher = None

    @property
    def outputs_drawn(self) -> int:
        return self._counter
