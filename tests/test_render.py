import unittest

from mcsearch.render import (
    flatten_component, render_description, render_full, render_players, strip_formatting_codes,
)
from mcsearch.status import (
    ComponentDescription, PlayerSample, Players, Segment, StatusResponse, TextDescription,
)


class TestStripFormattingCodes(unittest.TestCase):
    def test_strips_color_and_reset(self):
        self.assertEqual(strip_formatting_codes("§aHello§r World"), "Hello World")

    def test_plain_text_unchanged(self):
        self.assertEqual(strip_formatting_codes("Hello World"), "Hello World")

    def test_style_codes_and_case(self):
        self.assertEqual(strip_formatting_codes("§l§KBold§O§F!"), "Bold!")

    def test_unknown_codes_kept(self):
        self.assertEqual(strip_formatting_codes("§zA§"), "§zA§")


class TestDescription(unittest.TestCase):
    def test_text(self):
        self.assertEqual(render_description(TextDescription("§6Welcome")), "Welcome")

    def test_component_in_order(self):
        component = Segment("§aA", (
            Segment("B", (Segment("C"),)),
            Segment("D"),
            Segment("§bE"),
        ))
        self.assertEqual(render_description(ComponentDescription(component)), "ABCDE")

    def test_component_without_text(self):
        self.assertEqual(flatten_component(Segment("", (Segment("x"),))), "x")


class TestPlayers(unittest.TestCase):
    def test_nobody_online(self):
        self.assertEqual(render_players(Players(0, 20)), "0/20")

    def test_sample(self):
        players = Players(2, 20, [PlayerSample("§cAlice", "1"), PlayerSample("Bob", "2")])
        self.assertEqual(render_players(players), "2/20\n1.Alice\n2.Bob\n")

    def test_online_without_sample(self):
        self.assertEqual(render_players(Players(3, 20)), "3/20")

    def test_zero_online_ignores_sample(self):
        self.assertEqual(render_players(Players(0, 20, [PlayerSample("Ghost", "0")])), "0/20")


class TestRenderFull(unittest.TestCase):
    def test_layout(self):
        status = StatusResponse(Players(1, 5, [PlayerSample("X", "0")]), TextDescription("§aHi"))
        self.assertEqual(render_full(status, "mc.example.org", 25565),
                         "(1/5\n1.X\n)\nMotd:Hi\n地址:mc.example.org:25565")

    def test_empty_server(self):
        status = StatusResponse(Players(0, 10), ComponentDescription(Segment("Lobby")))
        self.assertEqual(render_full(status, "127.0.0.1", 31219),
                         "(0/10)\nMotd:Lobby\n地址:127.0.0.1:31219")


if __name__ == "__main__":
    unittest.main()
