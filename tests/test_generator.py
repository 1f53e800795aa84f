import unittest

import requests

from riskpaths.config.env import GeneratorConfig
from riskpaths.reports.generator import GenerationError, MistralGenerator
from riskpaths.reports.prompts import SYSTEM_PROMPT, build_report_prompt


class FakeResponse:
    def __init__(self, status_code, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("no JSON")
        return self._body


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        r = self.responses.pop(0)
        if isinstance(r, Exception):
            raise r
        return r


def _ok(content):
    return FakeResponse(200, {"choices": [{"message": {"content": content}}]})


CONFIG = GeneratorConfig(api_key="k", base_url="https://llm.test/v1",
                         models=("m-large", "m-small", "m-tiny"), fallback_delay_sec=0)


class TestMistralGenerator(unittest.TestCase):
    def test_first_model_success(self):
        session = FakeSession([_ok("<h1>Report</h1>")])
        gen = MistralGenerator(CONFIG, session=session)
        self.assertEqual(gen.generate("prompt"), "<h1>Report</h1>")
        call = session.calls[0]
        self.assertEqual(call["url"], "https://llm.test/v1/chat/completions")
        self.assertEqual(call["json"]["model"], "m-large")
        self.assertEqual(call["json"]["messages"][0], {"role": "system", "content": SYSTEM_PROMPT})
        self.assertEqual(call["json"]["messages"][1]["content"], "prompt")
        self.assertEqual(call["headers"]["Authorization"], "Bearer k")

    def test_falls_back_through_models(self):
        session = FakeSession([
            FakeResponse(429, text="rate limited"),
            FakeResponse(500, text="boom"),
            _ok("<p>ok</p>"),
        ])
        gen = MistralGenerator(CONFIG, session=session)
        self.assertEqual(gen.generate("p"), "<p>ok</p>")
        self.assertEqual([c["json"]["model"] for c in session.calls], ["m-large", "m-small", "m-tiny"])
        self.assertEqual([a["success"] for a in gen.attempts], [False, False, True])

    def test_attempts_cover_only_the_latest_call(self):
        session = FakeSession([FakeResponse(429, text="slow"), _ok("<p>1</p>")] + [_ok("<p>n</p>")] * 50)
        gen = MistralGenerator(CONFIG, session=session)
        gen.generate("p")
        self.assertEqual(len(gen.attempts), 2)
        for _ in range(50):
            gen.generate("p")
        self.assertEqual(gen.attempts, [{"model": "m-large", "success": True}])

    def test_unexpected_body_moves_on(self):
        session = FakeSession([FakeResponse(200, {"choices": []}), _ok("<p>second</p>")])
        gen = MistralGenerator(CONFIG, session=session)
        self.assertEqual(gen.generate("p"), "<p>second</p>")

    def test_all_models_fail(self):
        session = FakeSession([
            FakeResponse(503, text="down"),
            requests.exceptions.InvalidURL("bad url"),
            FakeResponse(429, text="slow down"),
        ])
        gen = MistralGenerator(CONFIG, session=session)
        with self.assertRaises(GenerationError) as ctx:
            gen.generate("p")
        self.assertIn("m-tiny", str(ctx.exception))

    def test_missing_api_key(self):
        session = FakeSession([])
        gen = MistralGenerator(GeneratorConfig(api_key=None), session=session)
        with self.assertRaises(GenerationError):
            gen.generate("p")
        self.assertEqual(session.calls, [])


class TestPrompts(unittest.TestCase):
    def test_report_prompt_embeds_payload(self):
        prompt = build_report_prompt({"reportInputData": [{"pathId": "PATH_001"}]})
        self.assertIn('"pathId": "PATH_001"', prompt)
        self.assertIn("PD Adjustment Framework", prompt)
        self.assertIn("HTML", prompt)


if __name__ == "__main__":
    unittest.main()
