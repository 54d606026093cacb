# src/config/stopwords.py - v1
"""Process-wide stop-word set (English + Russian).

The default set is static data built once at import. A replacement set can be
loaded from a UTF-8 file (one word per line, ``#`` comments allowed) through
``load_stop_words``; the result is cached per path so every component shares a
single immutable instance.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

_ENGLISH = """
the be to of and a in that have i it for not on with he as you do at
this but his by from they we say her she or an will my one all would there
their what so up out if about who get which go me when make can like time no
just him know take people into year your good some could them see other than
then now look only come its over think also back after use two how our work
first well way even new want because any these give day most us
"""

_RUSSIAN = """
и в во не что он на я с со как а то все она так его но да ты к у же вы за бы
по только ее мне было вот от меня еще нет о из ему теперь когда даже ну вдруг
ли если уже или ни быть был него до вас нибудь опять уж вам ведь там потом
себя ничего ей может они тут где есть надо ней для мы тебя их чем была сам
чтоб без будто чего раз тоже себе под будет ж тогда кто этот того потому
этого какой совсем ним здесь этом один почти мой тем чтобы нее сейчас были
куда зачем всех никогда можно при наконец два об другой хоть после над больше
тот через эти нас про всего них какая много разве три эту моя впрочем хорошо
свою этой перед иногда лучше чуть том нельзя такой им более всегда конечно всю
"""

DEFAULT_STOP_WORDS: frozenset[str] = frozenset(_ENGLISH.split()) | frozenset(_RUSSIAN.split())


@lru_cache(maxsize=8)
def load_stop_words(path: Path | str | None = None) -> frozenset[str]:
    """Return the stop-word set, from ``path`` if given, else the built-in set.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
    """
    if path is None:
        return DEFAULT_STOP_WORDS

    file_path = Path(path).expanduser()
    words: set[str] = set()
    for line in file_path.read_text(encoding="utf-8").splitlines():
        line = line.split("#", 1)[0].strip().lower()
        if line:
            words.add(line)
    logger.info("Loaded %d stop words from %s", len(words), file_path)
    return frozenset(words)
