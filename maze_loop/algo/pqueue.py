from typing import Dict, Hashable, List

class IndexedPriorityQueue:
    """
    Binary min-heap over (priority, seq, key) entries with a key -> heap
    position map, so contains/update run in O(1)/O(log n).

    Equal priorities come out in insertion order (seq).
    """
    def __init__(self):
        self._heap: List[List] = []
        self._index: Dict[Hashable, int] = {}
        self._counter = 0

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __contains__(self, key) -> bool:
        return key in self._index

    def push(self, key, priority: float):
        if key in self._index:
            raise KeyError(f"{key!r} already queued")
        entry = [priority, self._counter, key]
        self._counter += 1
        self._heap.append(entry)
        self._index[key] = len(self._heap) - 1
        self._sift_up(len(self._heap) - 1)

    def update(self, key, priority: float):
        """Changes the priority of a queued key in either direction."""
        pos = self._index[key]
        old = self._heap[pos][0]
        self._heap[pos][0] = priority
        if priority < old:
            self._sift_up(pos)
        elif priority > old:
            self._sift_down(pos)

    def push_or_update(self, key, priority: float):
        if key in self._index:
            self.update(key, priority)
        else:
            self.push(key, priority)

    def pop(self):
        if not self._heap:
            raise IndexError("pop from empty queue")
        top = self._heap[0]
        last = self._heap.pop()
        del self._index[top[2]]
        if self._heap:
            self._heap[0] = last
            self._index[last[2]] = 0
            self._sift_down(0)
        return top[2]

    def _less(self, i: int, j: int) -> bool:
        a, b = self._heap[i], self._heap[j]
        return (a[0], a[1]) < (b[0], b[1])

    def _swap(self, i: int, j: int):
        heap = self._heap
        heap[i], heap[j] = heap[j], heap[i]
        self._index[heap[i][2]] = i
        self._index[heap[j][2]] = j

    def _sift_up(self, pos: int):
        while pos > 0:
            parent = (pos - 1) // 2
            if not self._less(pos, parent):
                break
            self._swap(pos, parent)
            pos = parent

    def _sift_down(self, pos: int):
        n = len(self._heap)
        while True:
            smallest = pos
            left = 2 * pos + 1
            right = left + 1
            if left < n and self._less(left, smallest):
                smallest = left
            if right < n and self._less(right, smallest):
                smallest = right
            if smallest == pos:
                break
            self._swap(pos, smallest)
            pos = smallest
