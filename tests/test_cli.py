import json

from hotcaseai.cli import main

from .conftest import ORDER_SAMPLES


def _train(tmp_path):
    samples = tmp_path / "samples.txt"
    samples.write_text("\n".join(ORDER_SAMPLES) + "\n", encoding="utf-8")
    store_dir = tmp_path / "store"
    code = main(["--store-dir", str(store_dir), "train", "orders", str(samples), "--epochs", "2", "--seed", "1"])
    return code, store_dir


class TestCli:
    def test_train_predict_info_clear(self, tmp_path):
        code, store_dir = _train(tmp_path)
        assert code == 0
        assert any(store_dir.iterdir())
        assert main(["--store-dir", str(store_dir), "predict", "orders", "order 2030 x"]) == 0
        assert main(["--store-dir", str(store_dir), "info", "orders"]) == 0
        assert main(["--store-dir", str(store_dir), "clear", "orders"]) == 0
        assert list(store_dir.iterdir()) == []
        assert main(["--store-dir", str(store_dir), "predict", "orders", "order 2030 x"]) == 1

    def test_train_rejects_short_input(self, tmp_path):
        samples = tmp_path / "samples.txt"
        samples.write_text("one\n\none\n", encoding="utf-8")
        assert main(["--store-dir", str(tmp_path / "s"), "train", "m", str(samples)]) == 2

    def test_match(self, tmp_path):
        settings = tmp_path / "settings.json"
        settings.write_text(
            json.dumps(
                {
                    "rules": [
                        {"id": "r1", "key": "Alt+KeyE", "case": "email", "action": "script-mail"},
                        {"id": "r2", "key": "Alt+KeyE", "case": "regexp-ticket", "action": "prompt-ticket"},
                    ],
                    "regexps": [{"id": "ticket", "pattern": "^T-\\d+$", "flags": ""}],
                }
            ),
            encoding="utf-8",
        )
        store_dir = str(tmp_path / "store")
        assert main(["--store-dir", store_dir, "match", str(settings), "T-100"]) == 0
        assert main(["--store-dir", store_dir, "match", str(settings), "nothing"]) == 1

    def test_match_natural_language(self, tmp_path):
        settings = tmp_path / "settings.json"
        settings.write_text(
            json.dumps({"rules": [{"id": "r1", "key": "Alt+KeyT", "case": "eng", "action": "prompt-translate"}]}),
            encoding="utf-8",
        )
        text = "The quick brown fox jumps over the lazy dog while the farmer watches from the porch."
        assert main(["--store-dir", str(tmp_path / "store"), "match", str(settings), text]) == 0

    def test_match_rejects_rule_without_case(self, tmp_path):
        settings = tmp_path / "settings.json"
        settings.write_text(json.dumps({"rules": [{"id": "r1", "key": "Alt+KeyE", "action": "noop"}]}), encoding="utf-8")
        assert main(["--store-dir", str(tmp_path / "store"), "match", str(settings), "anything"]) == 2
