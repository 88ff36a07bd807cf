"""
Alias allocation for shorturl.

An alias is the store-assigned record id written as a Base62 numeral:

- Alphabet: "0-9a-zA-Z" in that order; a character's digit value is its index.
- Most-significant digit first, no padding, no prefix.
- encode(1) == "1", encode(61) == "Z", encode(62) == "10".

Properties:
- Deterministic: the same id always yields the same alias.
- Injective: distinct positive ids never share an alias, so no collision
  check against the store is needed.
- Reversible: decode(encode(n)) == n for every positive n.

Only positive ids are accepted. Zero would encode to "0", which is why a
well-formed alias never starts with "0".
"""

from dataclasses import dataclass, field
from typing import Dict

from ..errors import InvalidEncodingInput, MalformedAlias

BASE62_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


@dataclass(frozen=True)
class Base62Codec:
    """Positive integer <-> alias codec over a fixed alphabet."""
    alphabet: str = BASE62_ALPHABET
    _index: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if len(set(self.alphabet)) != len(self.alphabet) or len(self.alphabet) < 2:
            raise ValueError("alphabet must hold at least two distinct characters")
        object.__setattr__(self, "_index", {ch: i for i, ch in enumerate(self.alphabet)})

    @property
    def base(self) -> int:
        return len(self.alphabet)

    def encode(self, record_id: int) -> str:
        """
        Encode a positive integer id into its alias.

        Raises:
            InvalidEncodingInput: for non-integers (bool included), zero and negatives.
        """
        if isinstance(record_id, bool) or not isinstance(record_id, int) or record_id <= 0:
            raise InvalidEncodingInput(record_id)
        out = []
        num = record_id
        while num > 0:
            num, rem = divmod(num, self.base)
            out.append(self.alphabet[rem])
        return "".join(reversed(out))

    def decode(self, alias: str) -> int:
        """
        Decode an alias produced by `encode` back into its id.

        Raises:
            MalformedAlias: empty string, characters outside the alphabet,
                or a leading zero digit (never produced by `encode`).
        """
        if not isinstance(alias, str) or not alias:
            raise MalformedAlias(alias, "empty")
        if alias[0] == self.alphabet[0]:
            raise MalformedAlias(alias, "leading zero digit")
        num = 0
        for ch in alias:
            digit = self._index.get(ch)
            if digit is None:
                raise MalformedAlias(alias, f"character {ch!r} outside alphabet")
            num = num * self.base + digit
        return num


DEFAULT_CODEC = Base62Codec()


def encode(record_id: int) -> str:
    return DEFAULT_CODEC.encode(record_id)


def decode(alias: str) -> int:
    return DEFAULT_CODEC.decode(alias)


def allocate_alias(record_id: int) -> str:
    """
    Derive the alias for a freshly inserted record.

    Called once, right after the insert returned `record_id`. The caller
    persists the alias back onto the record.
    """
    return DEFAULT_CODEC.encode(record_id)
