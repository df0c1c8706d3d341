# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Configuration management for the structural schema validator."""

import os
import logging
from dataclasses import dataclass

from .exceptions import ConfigurationError
from .utils.logging_utils import configure_split_stream_logging

ENV_PREFIX = "STRUCTURAL_SCHEMA_"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(ENV_PREFIX + name, str(default))
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be an integer, got: {raw!r}")
    if value <= 0:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be positive, got: {value}")
    return value


@dataclass
class ValidatorConfig:
    """Configuration class for schema loading and linting."""
    log_level: str = "INFO"
    print_level: str = "ERROR"
    cache_enabled: bool = True

    # maximum nesting of a raw schema document, in mapping/list levels
    max_depth: int = 128
    # maximum expanded size of a raw schema document, aliases counted per reference
    max_nodes: int = 1_000_000

    @classmethod
    def from_env(cls) -> 'ValidatorConfig':
        """Create configuration from environment variables."""
        return cls(
            log_level=os.getenv(ENV_PREFIX + 'LOG_LEVEL', 'INFO'),
            print_level=os.getenv(ENV_PREFIX + 'PRINT_LEVEL', 'ERROR'),
            cache_enabled=os.getenv(ENV_PREFIX + 'CACHE_ENABLED', 'true').lower() == 'true',
            max_depth=_env_int('MAX_DEPTH', 128),
            max_nodes=_env_int('MAX_NODES', 1_000_000),
        )

    def set_logging(self) -> logging.Logger:
        """Setup logging based on configuration."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        stderr_level = getattr(logging, self.print_level.upper(), logging.ERROR)

        formatter = logging.Formatter('%(name)s - %(levelname)s - %(message)s')
        configure_split_stream_logging(level=level, stderr_level=stderr_level, formatter=formatter)

        return logging.getLogger('structural_schema')


# Global configuration instance
validator_config = ValidatorConfig.from_env()
