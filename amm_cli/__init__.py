"""AMM CLI — constant product pool explorer."""

from amm_cli.central_config import PROJECT_VERSION as __version__

__all__ = ["__version__"]
