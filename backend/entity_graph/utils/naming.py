"""命名工具: 把 namespaced id 转成可读标题。"""
from __future__ import annotations

from typing import Union

_SUFFIXES = (".behavior", ".geo", ".entity")


def _capitalize_words(name: str) -> str:
    """每个单词首字母大写（只处理 a-z，其余字符原样保留）。"""
    chars = list(name)
    last_was_space = False
    for i, ch in enumerate(chars):
        if ch == " ":
            last_was_space = True
            continue
        if (last_was_space or i == 0) and "a" <= ch <= "z":
            chars[i] = ch.upper()
        last_was_space = False
    return "".join(chars)


def humanify_name(name: Union[str, bool, int, float]) -> str:
    """'minecraft:start_jumping' → 'Start Jumping'。

    规则:
      - 去掉 .behavior / .geo / .entity 后缀
      - 去掉第一个冒号之前的命名空间
      - 下划线 → 空格
      - 'a.bcd' 形式 (点号位置 >= 4) → 'bcd a' 顺序对调
      - 单词首字母大写
    """
    if isinstance(name, (bool, int, float)):
        return str(name).lower() if isinstance(name, bool) else str(name)

    for suffix in _SUFFIXES:
        if name.endswith(suffix):
            name = name[: -len(suffix)]
            break

    colon = name.find(":")
    if colon >= 0:
        name = name[colon + 1:]

    if name.endswith("_bit"):
        name = name[:-4]

    name = name.replace("_", " ")

    period = name.find(".")
    if period >= 4:
        name = name[period + 1:] + " " + name[:period]

    return _capitalize_words(name)


def humanify_name_remove_namespaces(name: Union[str, bool, int, float]) -> str:
    """同 humanify_name，但额外去掉所有 'xxx:' 前缀和剩余的点号分段。"""
    if isinstance(name, str):
        if ":" in name:
            name = name[name.rfind(":") + 1:]
        if "." in name:
            name = name[name.rfind(".") + 1:]
    return humanify_name(name)
