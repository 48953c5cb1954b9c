"""Per-vehicle mutual exclusion

Serializes the check-then-insert of reservations for one vehicle inside a
process. Across processes the vehicle row lock (SELECT FOR UPDATE) taken by
the reservation use case provides the same guarantee on databases that
support it.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict


class VehicleLocks:

    def __init__(self):
        self._locks: Dict[int, asyncio.Lock] = {}
        # holders plus waiters per vehicle; the entry goes when it drops to zero
        self._users: Dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, vehicle_id: int) -> AsyncIterator[None]:
        lock = self._locks.get(vehicle_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[vehicle_id] = lock
        self._users[vehicle_id] = self._users.get(vehicle_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[vehicle_id] -= 1
            if self._users[vehicle_id] == 0:
                del self._users[vehicle_id]
                del self._locks[vehicle_id]
