"""
SnippetLibrary: source of target texts, grouped by language.
Ships a small built-in set and accepts additional snippets at runtime.
"""
import logging
import random
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, field_validator

from models.typing_config import Language

logger = logging.getLogger(__name__)


class Snippet(BaseModel):
    """Snippet data model with validation"""

    language: Language
    code: str

    model_config = {"frozen": True}

    @field_validator("code")
    @classmethod
    def code_must_not_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Snippet code cannot be empty")
        return v


BUILTIN_SNIPPETS: Dict[Language, List[str]] = {
    Language.TYPESCRIPT: [
        "const sum = (values: number[]): number =>\n  values.reduce((acc, v) => acc + v, 0);",
        "interface User {\n  id: string;\n  name: string;\n}",
    ],
    Language.JAVASCRIPT: [
        "function debounce(fn, ms) {\n  let t;\n  return (...args) => {\n    clearTimeout(t);\n    t = setTimeout(() => fn(...args), ms);\n  };\n}",
        "const unique = (items) => [...new Set(items)];",
    ],
    Language.PYTHON: [
        "def chunks(items, size):\n    for i in range(0, len(items), size):\n        yield items[i:i + size]",
        "squares = {n: n * n for n in range(10)}",
    ],
    Language.RUST: [
        "fn max(values: &[i32]) -> Option<i32> {\n    values.iter().copied().max()\n}",
    ],
    Language.GO: [
        "func reverse(s string) string {\n\tr := []rune(s)\n\tfor i, j := 0, len(r)-1; i < j; i, j = i+1, j-1 {\n\t\tr[i], r[j] = r[j], r[i]\n\t}\n\treturn string(r)\n}",
    ],
    Language.JAVA: [
        "public static int sum(int[] values) {\n    int total = 0;\n    for (int v : values) total += v;\n    return total;\n}",
    ],
    Language.CPP: [
        "template <typename T>\nT clamp(T v, T lo, T hi) {\n    return v < lo ? lo : (v > hi ? hi : v);\n}",
    ],
}


class SnippetLibrary:
    def __init__(
        self,
        snippets: Optional[Iterable[Snippet]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._by_language: Dict[Language, List[Snippet]] = {}
        if snippets is None:
            snippets = [
                Snippet(language=language, code=code)
                for language, codes in BUILTIN_SNIPPETS.items()
                for code in codes
            ]
        for snippet in snippets:
            self.add(snippet)

    def add(self, snippet: Snippet) -> None:
        self._by_language.setdefault(snippet.language, []).append(snippet)

    def for_language(self, language: Language) -> List[Snippet]:
        return list(self._by_language.get(language, []))

    def get_random_snippet(self, language: Language) -> Snippet:
        """Pick a snippet for the language.

        Raises:
            LookupError: if the library has no snippet for the language.
        """
        candidates = self._by_language.get(language)
        if not candidates:
            raise LookupError(f"No snippets available for {language.value}")
        snippet = self._rng.choice(candidates)
        logger.debug("Picked %s snippet of %d chars", language.value, len(snippet.code))
        return snippet
