"""Example plugin shipped with the editor: word count and go-to-line."""

from typing import List

from .commands import Command
from .errors import EditorError, PluginInitError
from .plugins import Plugin


class StatsPlugin(Plugin):

    def __init__(self):
        self.editor = None

    def identify(self) -> str:
        return "stats"

    def commands(self):
        return [
            Command("wordcount", self.word_count, aliases=("wc",),
                    description="Count lines, words and characters"),
            Command("goto", self.goto, aliases=("g",),
                    description="Jump to a line number"),
        ]

    def initialize(self, host_context):
        if not hasattr(host_context, "viewport"):
            raise PluginInitError("stats plugin needs an editor session")
        self.editor = host_context

    def cleanup(self):
        self.editor = None

    def word_count(self, editor, args: List[str]):
        lines = editor.document.lines
        words = sum(len(line.split()) for line in lines)
        chars = sum(len(line) for line in lines)
        editor.show_message(f"{len(lines)} lines, {words} words, {chars} characters")

    def goto(self, editor, args: List[str]):
        if not args:
            raise EditorError("usage: goto LINE")
        try:
            line = int(args[0])
        except ValueError:
            raise EditorError(f"not a line number: {args[0]}") from None
        editor.viewport.goto_line(line - 1)


def create_plugin() -> Plugin:
    return StatsPlugin()
