from __future__ import annotations

import codecs
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from dotenv import find_dotenv, load_dotenv

from .expander import DEFAULT_ENCODING

DEFAULT_TEMPLATE: Final = "cloud-init.tmpl.yaml"

TEMPLATE_ENV: Final = "EXPANDER_TEMPLATE"
ENCODING_ENV: Final = "EXPANDER_ENCODING"


@dataclass(frozen=True)
class Settings:
    """Runtime settings resolved from the environment."""

    template: str = DEFAULT_TEMPLATE
    encoding: str = DEFAULT_ENCODING


def load_settings(env_file: Path | None = None) -> Settings:
    """
    Load settings from the process environment.

    A ``.env`` file is read first (*env_file*, or the nearest one found from the
    working directory). Variables already set in the environment win over the
    file.

    Raises:
        ValueError: If the configured encoding is not a known codec.
    """
    load_dotenv(env_file if env_file is not None else find_dotenv(usecwd=True))

    encoding = os.getenv(ENCODING_ENV) or DEFAULT_ENCODING
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise ValueError(f"{ENCODING_ENV} is not a known encoding: {encoding}") from e

    return Settings(
        template=os.getenv(TEMPLATE_ENV) or DEFAULT_TEMPLATE,
        encoding=encoding,
    )
