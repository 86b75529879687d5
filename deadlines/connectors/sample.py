"""Static sample source (offline demos and tests)."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from deadlines.models.domain import SourceFile

from .base import BaseSource, PermanentError


SAMPLE_DOCUMENTS: Dict[str, Dict[str, str]] = {
    "AI": {
        "aaai.yml": """\
- title: AAAI
  description: AAAI Conference on Artificial Intelligence
  sub: AI
  rank:
    ccf: A
    core: A*
    thcpl: A
  dblp: aaai
  confs:
    - year: 2024
      id: aaai24
      link: https://aaai.org/aaai-conference/
      timeline:
        - abstract_deadline: '2023-08-08 23:59:59'
          deadline: '2023-08-15 23:59:59'
      timezone: UTC-12
      date: February 20-27, 2024
      place: Vancouver, Canada
    - year: 2025
      id: aaai25
      link: https://aaai.org/conference/aaai/aaai-25/
      timeline:
        - abstract_deadline: '2024-08-07 23:59:59'
          deadline: '2024-08-15 23:59:59'
      timezone: UTC-12
      date: February 25 - March 4, 2025
      place: Philadelphia, Pennsylvania, USA
""",
        "ijcai.yml": """\
- title: IJCAI
  description: International Joint Conference on Artificial Intelligence
  sub: AI
  rank:
    ccf: A
    core: A*
    thcpl: A
  dblp: ijcai
  confs:
    - year: 2025
      id: ijcai25
      link: https://2025.ijcai.org/
      timeline:
        - abstract_deadline: '2025-01-16 23:59:59'
          deadline: '2025-01-23 23:59:59'
      timezone: AoE
      date: August 16-22, 2025
      place: Montreal, Canada
""",
    },
    "NW": {
        "sigcomm.yml": """\
- title: SIGCOMM
  description: ACM International Conference on Applications, Technologies, Architectures, and Protocols for Computer Communication
  sub: NW
  rank:
    ccf: A
    core: A*
  dblp: sigcomm
  confs:
    - year: 2025
      id: sigcomm25
      link: https://conferences.sigcomm.org/sigcomm/2025/
      timeline:
        - abstract_deadline: '2025-01-24 23:59:59'
          deadline: '2025-01-31 23:59:59'
      timezone: AoE
      date: September 8-11, 2025
      place: Coimbra, Portugal
""",
    },
    "SE": {
        "icse.yml": """\
- title: ICSE
  description: International Conference on Software Engineering
  sub: SE
  rank:
    ccf: A
    core: A*
    thcpl: A
  dblp: icse
  confs: []
""",
    },
}


class SampleSource(BaseSource):
    """Serves built-in YAML documents; a mapping can be injected instead."""

    name = "sample"

    def __init__(self, documents: Optional[Mapping[str, Mapping[str, str]]] = None, extension: str = ".yml") -> None:
        super().__init__(extension)
        self._documents = documents if documents is not None else SAMPLE_DOCUMENTS

    async def list_files(self) -> List[SourceFile]:
        return [
            SourceFile(category=category, name=name, location=f"sample://{category}/{name}")
            for category, files in self._documents.items()
            for name in files
            if self.matches(name)
        ]

    async def read(self, file: SourceFile) -> str:
        try:
            return self._documents[file.category][file.name]
        except KeyError as exc:
            raise PermanentError(f"no sample document {file.location}") from exc
