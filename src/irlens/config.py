"""Embedding configuration: vocabulary source and section weights."""

import os
from dataclasses import dataclass

# Default weights applied to each vocabulary section
DEFAULT_OPC_WEIGHT = 1.0
DEFAULT_TYPE_WEIGHT = 0.5
DEFAULT_ARG_WEIGHT = 0.2

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class EmbeddingConfig:
    """
    Settings shared by the vocabulary store and the embedders.

    An empty ``vocab_path`` means no file is configured; the vocabulary
    must then be supplied directly or loading fails.
    """

    vocab_path: str = ""
    opc_weight: float = DEFAULT_OPC_WEIGHT
    type_weight: float = DEFAULT_TYPE_WEIGHT
    arg_weight: float = DEFAULT_ARG_WEIGHT
    strict: bool = False  # fail on vocabulary misses instead of using zeros

    @classmethod
    def from_env(cls) -> "EmbeddingConfig":
        """
        Build a config from IR2VEC_* environment variables.

        Recognized: IR2VEC_VOCAB_PATH, IR2VEC_OPC_WEIGHT, IR2VEC_TYPE_WEIGHT,
        IR2VEC_ARG_WEIGHT, IR2VEC_STRICT. Unset variables keep their defaults.
        """
        return cls(
            vocab_path=os.environ.get("IR2VEC_VOCAB_PATH", ""),
            opc_weight=float(os.environ.get("IR2VEC_OPC_WEIGHT", DEFAULT_OPC_WEIGHT)),
            type_weight=float(os.environ.get("IR2VEC_TYPE_WEIGHT", DEFAULT_TYPE_WEIGHT)),
            arg_weight=float(os.environ.get("IR2VEC_ARG_WEIGHT", DEFAULT_ARG_WEIGHT)),
            strict=os.environ.get("IR2VEC_STRICT", "").strip().lower() in _TRUTHY,
        )

    @property
    def weights(self) -> tuple[float, float, float]:
        """(opcode, type, argument) weights in section merge order."""
        return (self.opc_weight, self.type_weight, self.arg_weight)
