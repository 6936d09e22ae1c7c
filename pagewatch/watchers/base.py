from dataclasses import dataclass
from typing import List, Optional, Tuple

@dataclass(frozen=True)
class SourceConfig:
    name: str
    label: str
    url: str
    item_selector: str
    base_url: str = ""
    link_selector: str = "a"

    @property
    def link_base(self) -> str:
        return self.base_url or self.url

class Watcher:
    name: str = "base"
    def poll(self) -> List[Tuple[str, Optional[str]]]:
        raise NotImplementedError
