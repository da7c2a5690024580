"""Root conftest: exports .env.test into the environment before campus_chat.config is imported."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import dotenv_values

_env_test = Path(__file__).resolve().parent / ".env.test"
for _key, _value in dotenv_values(_env_test).items():
    if _value is not None:
        os.environ.setdefault(_key, _value)
