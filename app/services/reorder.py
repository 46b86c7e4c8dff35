from __future__ import annotations

from typing import Hashable, List, Sequence, TypeVar

T = TypeVar("T", bound=Hashable)


def move_item(order: Sequence[T], source_id: T, target_id: T) -> List[T]:
    """
    نقل العنصر source_id إلى موضع target_id الأصلي مع إزاحة العناصر الوسيطة بمقدار واحد.

    العملية ليست تبديلًا: يُحذف العنصر من موضعه ثم يُدرج في فهرس الهدف، فتحتفظ
    العناصر الواقعة خارج المدى بترتيبها النسبي. إذا تطابق المعرفان أو غاب أحدهما
    يُعاد الترتيب كما هو.
    """
    items = list(order)
    if source_id == target_id or source_id not in items or target_id not in items:
        return items

    old_index = items.index(source_id)
    new_index = items.index(target_id)
    items.insert(new_index, items.pop(old_index))
    return items
