"""Static deployment scaffolding shipped next to generated code.

These files are boilerplate: they are not derived from the graph and are
included verbatim when an archive asks for deployment files.
"""

from __future__ import annotations

from typing import Dict, Union

from ..core.languages import Language

DOCKERFILE_NAME = "Dockerfile"
COMPOSE_NAME = "docker-compose.yml"

_PYTHON_DOCKERFILE = """\
FROM python:3.11-slim

WORKDIR /app

RUN pip install --no-cache-dir langgraph langchain-core

COPY spec.yml stub.py implementation.py ./

CMD ["python", "implementation.py"]
"""

_TYPESCRIPT_DOCKERFILE = """\
FROM node:20-slim

WORKDIR /app

RUN npm install --no-save @langchain/langgraph @langchain/core tsx

COPY spec.yml stub.ts implementation.ts ./

CMD ["npx", "tsx", "implementation.ts"]
"""

_COMPOSE = """\
services:
  agent:
    build: .
    environment:
      - OPENAI_API_KEY=${OPENAI_API_KEY:-}
      - ANTHROPIC_API_KEY=${ANTHROPIC_API_KEY:-}
    restart: "no"
"""

_DOCKERFILES = {
    Language.PYTHON: _PYTHON_DOCKERFILE,
    Language.TYPESCRIPT: _TYPESCRIPT_DOCKERFILE,
}


def deployment_files(language: Union[Language, str]) -> Dict[str, str]:
    """Return `{filename: content}` for the language's Dockerfile and compose file."""
    lang = Language.parse(language)
    return {DOCKERFILE_NAME: _DOCKERFILES[lang], COMPOSE_NAME: _COMPOSE}
