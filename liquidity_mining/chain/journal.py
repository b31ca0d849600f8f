"""
키 단위 변경 기록

되돌릴 수 있는 구성요소가 딕셔너리 값을 바꾸기 전에 이전 값을 기록합니다.
mark() 로 체크포인트를 열고 rollback(mark) 로 되돌리거나 release(mark) 로 확정합니다.
체크포인트는 중첩될 수 있으며 반드시 연 순서의 역순으로 닫아야 합니다.

비용은 체크포인트 이후 바뀐 키 수에만 비례합니다 (전체 잔고를 복사하지 않음).
"""

from typing import Any, Dict, Hashable, List, Tuple

_MISSING = object()

Entry = Tuple[Dict[Any, Any], Hashable, Any]


class Journal:
    """중첩 가능한 되돌리기 기록

    사용법:
        journal = Journal()
        mark = journal.mark()
        journal.set(balances, "0xA", 10)
        journal.rollback(mark)   # 또는 journal.release(mark)
    """

    def __init__(self):
        self._entries: List[Entry] = []
        self._depth = 0

    @property
    def depth(self) -> int:
        return self._depth

    def mark(self) -> int:
        self._depth += 1
        return len(self._entries)

    def set(self, mapping: Dict[Any, Any], key: Hashable, value: Any):
        """이전 값을 기록한 뒤 mapping[key] = value"""
        if self._depth:
            self._entries.append((mapping, key, mapping.get(key, _MISSING)))
        mapping[key] = value

    def pop(self, mapping: Dict[Any, Any], key: Hashable):
        """이전 값을 기록한 뒤 key 제거"""
        if key not in mapping:
            return
        if self._depth:
            self._entries.append((mapping, key, mapping[key]))
        del mapping[key]

    def rollback(self, mark: int):
        """mark 이후 변경을 역순으로 되돌리고 체크포인트를 닫음"""
        while len(self._entries) > mark:
            mapping, key, previous = self._entries.pop()
            if previous is _MISSING:
                mapping.pop(key, None)
            else:
                mapping[key] = previous
        self.release(mark)

    def release(self, mark: int):
        """체크포인트를 닫음. 가장 바깥 체크포인트면 기록을 비움"""
        if self._depth == 0:
            raise RuntimeError("열린 체크포인트가 없습니다")
        self._depth -= 1
        if self._depth == 0:
            self._entries.clear()
