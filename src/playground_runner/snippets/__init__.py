from playground_runner.snippets.compiler import compile_snippet, load_snippet, new_snippet_id
from playground_runner.snippets.libraries import LibraryReferences, parse_libraries
from playground_runner.snippets.model import CompiledSnippet, Snippet

__all__ = [
    "CompiledSnippet",
    "LibraryReferences",
    "Snippet",
    "compile_snippet",
    "load_snippet",
    "new_snippet_id",
    "parse_libraries",
]
