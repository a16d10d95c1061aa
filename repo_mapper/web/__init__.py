"""HTTP API over the repository analyzer."""

from repo_mapper.web.app import create_app

__all__ = ["create_app"]
