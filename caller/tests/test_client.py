import asyncio
import unittest
from unittest import mock

from caller.client import CallerClient
from caller.config import CallerSettings


def _response(status_code, payload):
    resp = mock.Mock()
    resp.status_code = status_code
    resp.json.return_value = payload
    resp.text = str(payload)
    return resp


class CallerClientTests(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = CallerSettings(
            base_url="http://game.test", tournament_id="t1", admin_token="secret", timeout_seconds=3
        )
        self.session = mock.Mock()

    def test_draw_posts_count_with_token(self) -> None:
        self.session.request.return_value = _response(
            200, {"called_numbers": [4, 17, 62], "new_numbers": [17, 62]}
        )
        client = CallerClient(self.settings, session=self.session)

        snapshot = asyncio.run(client.draw("t1", 2))

        self.session.request.assert_called_once_with(
            "POST",
            "http://game.test/tournaments/t1/numbers/draw",
            json={"count": 2},
            headers={"X-Admin-Token": "secret"},
            timeout=3,
        )
        self.assertEqual(snapshot.numbers, (4, 17, 62))
        self.assertEqual(snapshot.new_numbers, (17, 62))
        self.assertEqual(snapshot.latest, 62)

    def test_get_called_numbers(self) -> None:
        self.session.request.return_value = _response(200, {"called_numbers": []})
        client = CallerClient(self.settings, session=self.session)

        snapshot = asyncio.run(client.get_called_numbers("t1"))

        self.assertEqual(snapshot.numbers, ())
        self.assertIsNone(snapshot.latest)
        args, _ = self.session.request.call_args
        self.assertEqual(args, ("GET", "http://game.test/tournaments/t1/numbers"))

    def test_error_status_raises(self) -> None:
        self.session.request.return_value = _response(400, {"error": "All numbers have been called"})
        client = CallerClient(self.settings, session=self.session)

        with self.assertRaises(RuntimeError) as ctx:
            asyncio.run(client.draw("t1", 1))
        self.assertIn("All numbers have been called", str(ctx.exception))

    def test_malformed_payload(self) -> None:
        self.session.request.return_value = _response(200, {"called_numbers": ["7"]})
        client = CallerClient(self.settings, session=self.session)
        with self.assertRaises(ValueError):
            asyncio.run(client.get_called_numbers("t1"))

    def test_non_list_called_numbers(self) -> None:
        client = CallerClient(self.settings, session=self.session)
        for payload in ({"called_numbers": None}, {"called_numbers": 7}, {"called_numbers": "7"}):
            self.session.request.return_value = _response(200, payload)
            with self.assertRaises(ValueError):
                asyncio.run(client.get_called_numbers("t1"))

    def test_non_list_new_numbers(self) -> None:
        self.session.request.return_value = _response(200, {"called_numbers": [3], "new_numbers": 3})
        client = CallerClient(self.settings, session=self.session)
        with self.assertRaises(ValueError):
            asyncio.run(client.draw("t1", 1))


if __name__ == "__main__":
    unittest.main()
