from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection


@dataclass
class MongoClientFactory:
    uri: str
    db_name: str
    _client: Optional[MongoClient] = field(default=None, init=False, repr=False)

    def _connect(self) -> MongoClient:
        if self._client is None:
            # Connection is lazy; no I/O happens until the first operation.
            self._client = MongoClient(self.uri)
        return self._client

    def get_collection(self, collection_name: str) -> Collection:
        return self._connect()[self.db_name][collection_name]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
