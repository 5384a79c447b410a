from __future__ import annotations

import unittest

from immutable_bot.handlers import authorize_command, deauthorize_command, quote_command
from immutable_bot.handlers.router import BOT_COMMANDS, COMMANDS, build_command_handlers, help_text


class CommandTableTests(unittest.TestCase):
    def test_one_handler_per_command(self):
        handlers = build_command_handlers()
        names = [next(iter(handler.commands)) for handler in handlers]
        self.assertEqual(names, ["help", "quote", "guesswho", "hug", "authorize", "deauthorize"])

    def test_chat_gate_applied_except_for_admin_commands(self):
        by_name = {next(iter(h.commands)): h.callback for h in build_command_handlers()}
        self.assertIs(by_name["quote"].__wrapped__, quote_command)
        self.assertIs(by_name["authorize"], authorize_command)
        self.assertIs(by_name["deauthorize"], deauthorize_command)

    def test_commands_registered_lowercase(self):
        # CommandHandler lowercases incoming commands, so /GuessWho only matches lowercase entries
        for handler in build_command_handlers():
            for name in handler.commands:
                self.assertEqual(name, name.lower())
        self.assertIn("GuessWho".lower(), {next(iter(h.commands)) for h in build_command_handlers()})

    def test_bot_commands_mirror_table(self):
        self.assertEqual(
            [(c.command, c.description) for c in BOT_COMMANDS],
            [(spec.name, spec.description) for spec in COMMANDS],
        )

    def test_help_text(self):
        self.assertEqual(
            help_text().splitlines()[:3],
            ["Commands:", "/help — Display help message", "/quote — Save a quote (reply to a message)"],
        )


if __name__ == "__main__":
    unittest.main()
