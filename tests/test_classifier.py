import json
from unittest.mock import MagicMock

import pytest

from hotcaseai.errors import ValidationError
from hotcaseai.inference.cache import ModelCache
from hotcaseai.inference.predictor import (
    ShapeClassifier,
    clear_saved_model,
    model_info,
    predict,
    score_text,
    storage_keys,
)
from hotcaseai.schemas import ClassifierConfig, ClassifierState
from hotcaseai.storage import MemoryStore

from .conftest import ORDER_SAMPLES


class TestTrain:
    def test_train_marks_model_trained(self, trained, store, cache):
        assert trained.trained
        assert trained.state.config.model_trained
        assert trained.state.config.tokenizer_size == len(trained.state.vocabulary)
        assert "orders" in cache

    def test_history(self, store, cache, fast_options):
        classifier = ShapeClassifier("orders", store=store, cache=cache)
        history = classifier.train("\n".join(ORDER_SAMPLES), fast_options)
        assert history.positives == 4
        assert history.negatives == 4
        assert len(history.epochs) == fast_options.epochs
        assert history.final.val_loss is not None
        assert 0.0 <= history.final.acc <= 1.0

    def test_train_persists_artifacts(self, trained, store):
        keys = storage_keys("orders")
        assert isinstance(store.get(keys["weights"]), bytes)
        config = json.loads(store.get(keys["config"]))
        assert config == {
            "maxSequenceLength": 50,
            "embeddingDim": 32,
            "modelTrained": True,
            "tokenizerSize": len(trained.state.vocabulary),
        }
        pairs = json.loads(store.get(keys["tokenizer"]))
        assert dict(pairs) == trained.state.vocabulary

    def test_too_few_samples_leaves_state_untouched(self, trained, store, fast_options):
        before = trained.state
        with pytest.raises(ValidationError):
            trained.train(["only", "two", "only", " "], fast_options)
        assert trained.state is before
        assert trained.trained

    def test_untrained_validation_error_writes_nothing(self, store, cache, fast_options):
        classifier = ShapeClassifier("empty", store=store, cache=cache)
        with pytest.raises(ValidationError):
            classifier.train("a\n\nb", fast_options)
        assert classifier.state is None
        assert len(store) == 0
        assert len(cache) == 0

    def test_fit_failure_propagates(self, store, cache, fast_options, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr("hotcaseai.inference.predictor.fit_network", explode)
        classifier = ShapeClassifier("broken", store=store, cache=cache)
        with pytest.raises(RuntimeError):
            classifier.train(ORDER_SAMPLES, fast_options)
        assert classifier.state is None
        assert len(store) == 0

    def test_retrain_replaces_state(self, trained, fast_options):
        previous = trained.state
        trained.train(["ab-1", "ab-2", "ab-3"], fast_options)
        assert trained.state is not previous
        assert previous.network is None
        assert "WORD_order" not in trained.state.vocabulary


class TestPredict:
    def test_confidence_in_range(self, trained):
        confidence = trained.predict("order 2028 omega")
        assert 0.0 <= confidence <= 1.0

    def test_idempotent(self, trained):
        assert trained.predict("order 2030 zeta") == trained.predict("order 2030 zeta")

    def test_untrained_returns_zero(self, store, cache):
        assert ShapeClassifier("nothing", store=store, cache=cache).predict("order 2024 alpha") == 0.0

    def test_unknown_tokens_short_circuit(self, trained):
        network = MagicMock()
        state = ClassifierState(network=network, vocabulary=trained.state.vocabulary, config=trained.state.config)
        assert score_text(state, "ЖЖ") == 0.0
        network.assert_not_called()

    def test_forward_failure_degrades_to_zero(self, trained):
        network = MagicMock(side_effect=RuntimeError("bad tensor"))
        state = ClassifierState(network=network, vocabulary=trained.state.vocabulary, config=trained.state.config)
        assert score_text(state, "order 2024 alpha") == 0.0

    def test_predict_touches_cache(self, trained, cache, clock):
        clock.advance(100.0)
        trained.predict("order 2024 alpha")
        assert cache.get("orders").last_used == clock.now


class TestPersistence:
    def test_round_trip_on_fresh_instance(self, trained, store):
        fresh = ShapeClassifier("orders", store=store, cache=ModelCache())
        assert fresh.load_model()
        assert fresh.trained
        assert len(fresh.state.vocabulary) == len(trained.state.vocabulary)
        for sample in ORDER_SAMPLES:
            assert fresh.predict(sample) == pytest.approx(trained.predict(sample), abs=1e-6)

    def test_load_prefers_cache(self, trained, store, cache):
        other = ShapeClassifier("orders", store=MemoryStore(), cache=cache)
        assert other.load_model()
        assert other.state is trained.state

    def test_load_missing_returns_false(self, store, cache):
        classifier = ShapeClassifier("missing", store=store, cache=cache)
        assert classifier.load_model() is False
        assert classifier.state is None

    def test_load_corrupt_resets_state(self, trained, store):
        store.set(storage_keys("orders")["weights"], b"not a joblib blob")
        fresh = ShapeClassifier("orders", store=store, cache=ModelCache())
        fresh.state = trained.state
        assert fresh.load_model() is False
        assert fresh.state is None

    def test_save_without_model_is_noop(self, store, cache):
        ShapeClassifier("none", store=store, cache=cache).save_model()
        assert len(store) == 0

    def test_clear_saved_model(self, trained, store, cache):
        state = trained.state
        trained.clear_saved_model()
        assert len(store) == 0
        assert "orders" not in cache
        assert state.network is None
        assert trained.state is None

    def test_model_info(self, trained, store):
        info = model_info("orders", store=store)
        assert info["vocabulary"] == len(trained.state.vocabulary)
        assert info["size_kb"] > 0
        assert model_info("missing", store=store) == {"size_kb": 0.0, "vocabulary": 0.0}


class TestModulePredict:
    def test_loads_on_demand(self, trained, store):
        cache = ModelCache()
        confidence = predict("orders", "order 2024 alpha", store=store, cache=cache)
        assert confidence == pytest.approx(trained.predict("order 2024 alpha"), abs=1e-6)
        assert "orders" in cache

    def test_unknown_model(self, store, cache):
        assert predict("ghost", "text", store=store, cache=cache) is None

    def test_untrained_config(self, store, cache):
        config = ClassifierConfig(model_trained=False)
        cache.put("draft", ClassifierState(network=MagicMock(), vocabulary={"a": 1}, config=config))
        assert predict("draft", "a", store=store, cache=cache) is None

    def test_after_clear(self, trained, store, cache):
        clear_saved_model("orders", store=store, cache=cache)
        assert predict("orders", "order 2024 alpha", store=store, cache=cache) is None


class TokenizerFailingStore(MemoryStore):
    def __init__(self):
        super().__init__()
        self.fail_tokenizer = False

    def set(self, key, value):
        if self.fail_tokenizer and key.startswith("classifier_tokenizer_"):
            raise OSError("disk full")
        super().set(key, value)


class TestPersistFailure:
    def test_failed_retrain_keeps_previous_artifacts(self, cache, fast_options):
        store = TokenizerFailingStore()
        classifier = ShapeClassifier("orders", store=store, cache=cache)
        classifier.train(ORDER_SAMPLES, fast_options)
        keys = storage_keys("orders")
        before = {name: store.get(key) for name, key in keys.items()}
        expected = classifier.predict(ORDER_SAMPLES[0])

        store.fail_tokenizer = True
        with pytest.raises(OSError):
            classifier.train(["ab-1", "ab-2", "ab-3"], fast_options)
        assert {name: store.get(key) for name, key in keys.items()} == before

        fresh = ShapeClassifier("orders", store=store, cache=ModelCache())
        assert fresh.load_model()
        assert "WORD_order" in fresh.state.vocabulary
        assert fresh.predict(ORDER_SAMPLES[0]) == pytest.approx(expected, abs=1e-6)

    def test_failed_first_train_leaves_store_empty(self, cache, fast_options):
        store = TokenizerFailingStore()
        store.fail_tokenizer = True
        with pytest.raises(OSError):
            ShapeClassifier("orders", store=store, cache=cache).train(ORDER_SAMPLES, fast_options)
        assert len(store) == 0
        assert "orders" not in cache

    def test_load_rejects_weights_vocabulary_mismatch(self, trained, store):
        keys = storage_keys("orders")
        store.set(keys["tokenizer"], json.dumps([["NGRAM_2_ab", 1]]))
        fresh = ShapeClassifier("orders", store=store, cache=ModelCache())
        assert fresh.load_model() is False
        assert fresh.state is None
