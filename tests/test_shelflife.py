"""Tests for shelf-life warning configuration and policy."""

import dataclasses

import pytest

from unitprice.models import InventoryItem, Offer
from unitprice.shelflife import (
    DEFAULT_SHELF_LIFE_CONFIG,
    SEVERITY_HIGH,
    SEVERITY_INFO,
    SEVERITY_WARNING,
    ShelfLifeWarningConfig,
    analyze_offer_shelf_life_warning,
    analyze_shelf_life_warning,
    get_shelf_life_warning_message,
    get_shelf_life_warning_severity,
    get_warning_threshold,
    is_shelf_life_sensitive,
    load_shelf_life_config,
    make_shelf_life_config,
    should_show_shelf_life_warning,
)

SEVERITY_RANK = {SEVERITY_INFO: 0, SEVERITY_WARNING: 1, SEVERITY_HIGH: 2}


class TestConfig:
    """Test building and loading shelf-life configuration"""

    def test_defaults(self):
        assert DEFAULT_SHELF_LIFE_CONFIG.default_threshold_multiplier == 3.0
        assert DEFAULT_SHELF_LIFE_CONFIG.minimum_quantity_threshold == 10.0
        assert DEFAULT_SHELF_LIFE_CONFIG.category_thresholds == {}
        assert DEFAULT_SHELF_LIFE_CONFIG.item_thresholds == {}

    def test_partial_override_keeps_defaults(self):
        config = make_shelf_life_config({"minimum_quantity_threshold": 5})
        assert config.minimum_quantity_threshold == 5.0
        assert config.default_threshold_multiplier == 3.0

    def test_override_on_base(self):
        base = make_shelf_life_config({"default_threshold_multiplier": 4})
        config = make_shelf_life_config({"category_thresholds": {"Dairy": 2.5}}, base=base)
        assert config.default_threshold_multiplier == 4.0
        assert config.category_thresholds == {"Dairy": 2.5}

    def test_none_minimum_means_zero(self):
        assert make_shelf_life_config({"minimum_quantity_threshold": None}).minimum_quantity_threshold == 0.0

    def test_config_is_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_SHELF_LIFE_CONFIG.default_threshold_multiplier = 1.0

    @pytest.mark.parametrize("overrides", [
        {"default_threshold_multiplier": 0},
        {"default_threshold_multiplier": float("inf")},
        {"minimum_quantity_threshold": -1},
        {"category_thresholds": {"Dairy": -2}},
        {"item_thresholds": ["yogurt"]},
        {"shelf_life_days": 7},
    ])
    def test_invalid_overrides(self, overrides):
        with pytest.raises(ValueError):
            make_shelf_life_config(overrides)

    def test_load_nested_yaml(self, tmp_path):
        path = tmp_path / "shelf.yaml"
        path.write_text(
            "shelf_life:\n"
            "  minimum_quantity_threshold: 6\n"
            "  category_thresholds:\n"
            "    Dairy: 2.5\n",
            encoding="utf-8",
        )
        config = load_shelf_life_config(path)
        assert config.minimum_quantity_threshold == 6.0
        assert config.category_thresholds == {"Dairy": 2.5}
        assert config.default_threshold_multiplier == 3.0

    def test_load_top_level_yaml(self, tmp_path):
        path = tmp_path / "shelf.yaml"
        path.write_text("item_thresholds:\n  yogurt: 4\n", encoding="utf-8")
        assert load_shelf_life_config(path).item_thresholds == {"yogurt": 4.0}

    def test_load_empty_yaml(self, tmp_path):
        path = tmp_path / "shelf.yaml"
        path.write_text("", encoding="utf-8")
        assert load_shelf_life_config(path) == DEFAULT_SHELF_LIFE_CONFIG

    def test_load_non_mapping(self, tmp_path):
        path = tmp_path / "shelf.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_shelf_life_config(path)

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_shelf_life_config(tmp_path / "missing.yaml")


class TestThresholds:
    """Test the item -> category -> default threshold chain"""

    def test_default(self, yogurt):
        assert get_warning_threshold(yogurt) == 3.0

    def test_category_override(self, yogurt):
        config = make_shelf_life_config({"category_thresholds": {"Dairy": 2.5}})
        assert get_warning_threshold(yogurt, config) == 2.5

    def test_item_beats_category(self, yogurt):
        config = make_shelf_life_config({
            "category_thresholds": {"Dairy": 2.5},
            "item_thresholds": {"yogurt": 4.0},
        })
        assert get_warning_threshold(yogurt, config) == 4.0

    def test_unrelated_overrides_ignored(self, yogurt):
        config = make_shelf_life_config({
            "category_thresholds": {"Produce": 1.0},
            "item_thresholds": {"milk": 1.0},
        })
        assert get_warning_threshold(yogurt, config) == 3.0

    @pytest.mark.parametrize("bad", [0, -1.0, float("nan"), float("inf")])
    def test_non_positive_override_skipped(self, yogurt, bad):
        """Only positive finite overrides take effect"""
        config = ShelfLifeWarningConfig(
            category_thresholds={"Dairy": 2.0},
            item_thresholds={"yogurt": bad},
        )
        assert get_warning_threshold(yogurt, config) == 2.0


class TestAnalyzeWarning:
    """Test warning decisions and severities"""

    def test_high_quantity(self, yogurt):
        """15 units at the default threshold 3 is a ratio of 5"""
        result = analyze_shelf_life_warning(yogurt, 15)

        assert result.should_show_warning
        assert result.severity == SEVERITY_HIGH
        assert result.exceeded_threshold == 3.0
        assert result.actual_quantity == 15
        assert "Yogurt" in result.warning_message
        assert "15" in result.warning_message

    def test_below_minimum_quantity(self, yogurt):
        result = analyze_shelf_life_warning(yogurt, 8)
        assert not result.should_show_warning
        assert result.severity == SEVERITY_INFO
        assert result.warning_message is None

    def test_minimum_quantity_is_inclusive(self, yogurt):
        result = analyze_shelf_life_warning(yogurt, 10)
        assert result.should_show_warning
        assert result.severity == SEVERITY_WARNING

    def test_not_sensitive(self, rice):
        result = analyze_shelf_life_warning(rice, 1000)
        assert not result.should_show_warning
        assert result.severity == SEVERITY_INFO
        assert not is_shelf_life_sensitive(rice)

    @pytest.mark.parametrize("quantity", [float("nan"), float("inf"), None, "12"])
    def test_non_numeric_quantity(self, yogurt, quantity):
        assert not analyze_shelf_life_warning(yogurt, quantity).should_show_warning

    def test_at_threshold_no_warning(self, yogurt):
        config = make_shelf_life_config({"minimum_quantity_threshold": 0, "default_threshold_multiplier": 20})
        assert not analyze_shelf_life_warning(yogurt, 20, config).should_show_warning
        assert analyze_shelf_life_warning(yogurt, 21, config).severity == SEVERITY_INFO

    def test_severity_boundaries(self, yogurt):
        config = make_shelf_life_config({"minimum_quantity_threshold": 0, "default_threshold_multiplier": 2})

        assert analyze_shelf_life_warning(yogurt, 5.9, config).severity == SEVERITY_INFO
        assert analyze_shelf_life_warning(yogurt, 6, config).severity == SEVERITY_WARNING
        assert analyze_shelf_life_warning(yogurt, 9.9, config).severity == SEVERITY_WARNING
        assert analyze_shelf_life_warning(yogurt, 10, config).severity == SEVERITY_HIGH

    def test_category_threshold(self, yogurt):
        config = make_shelf_life_config({"category_thresholds": {"Dairy": 2.5}})
        assert analyze_shelf_life_warning(yogurt, 12, config).severity == SEVERITY_WARNING
        assert analyze_shelf_life_warning(yogurt, 12.5, config).severity == SEVERITY_HIGH

    def test_severity_monotonic_in_quantity(self, yogurt):
        """Raising the quantity never lowers the severity"""
        config = make_shelf_life_config({"minimum_quantity_threshold": 0})
        previous = -1
        for tenths in range(0, 400):
            result = analyze_shelf_life_warning(yogurt, tenths / 10, config)
            rank = SEVERITY_RANK[result.severity] if result.should_show_warning else -1
            assert rank >= previous
            previous = rank

    def test_messages_by_severity(self, yogurt):
        config = make_shelf_life_config({"minimum_quantity_threshold": 0})
        info = analyze_shelf_life_warning(yogurt, 4, config).warning_message
        warning = analyze_shelf_life_warning(yogurt, 9, config).warning_message
        high = analyze_shelf_life_warning(yogurt, 15, config).warning_message

        assert info.startswith("ℹ️ Shelf-life sensitive: Yogurt")
        assert warning.startswith("⚠️ Large quantity purchase: 9 units of Yogurt")
        assert high.startswith("⚠️ High quantity purchase: 15 units")

    def test_deterministic(self, yogurt):
        assert analyze_shelf_life_warning(yogurt, 15) == analyze_shelf_life_warning(yogurt, 15)


class TestOfferHelpers:
    """Test offer-based convenience functions"""

    def test_offer_amount_is_quantity(self, yogurt):
        offer = Offer(amount=15, amount_unit="unit", total_price=30.0)
        assert analyze_offer_shelf_life_warning(yogurt, offer).severity == SEVERITY_HIGH
        assert should_show_shelf_life_warning(yogurt, offer)
        assert get_shelf_life_warning_severity(yogurt, offer) == SEVERITY_HIGH

    def test_small_offer(self, yogurt):
        offer = Offer(amount=2, amount_unit="unit", total_price=4.0)
        assert not should_show_shelf_life_warning(yogurt, offer)
        assert get_shelf_life_warning_severity(yogurt, offer) == SEVERITY_INFO

    def test_message_helper(self, yogurt):
        assert get_shelf_life_warning_message(yogurt, 8) is None
        assert "Yogurt" in get_shelf_life_warning_message(yogurt, 15)

    def test_custom_config_passed_through(self):
        milk = InventoryItem("milk", "Milk", "volume", "ml", shelf_life_sensitive=True)
        config = make_shelf_life_config({"item_thresholds": {"milk": 1.0}, "minimum_quantity_threshold": 2})
        offer = Offer(amount=2, amount_unit="l", total_price=3.0)
        assert get_shelf_life_warning_severity(milk, offer, config) == SEVERITY_INFO


class TestDirectlyBuiltConfig:
    """Test configs constructed without make_shelf_life_config"""

    @pytest.mark.parametrize("multiplier", [0, -2.0, float("nan"), float("inf"), None])
    def test_unusable_multiplier_falls_back_to_default(self, yogurt, multiplier):
        config = ShelfLifeWarningConfig(default_threshold_multiplier=multiplier)

        assert get_warning_threshold(yogurt, config) == 3.0
        result = analyze_shelf_life_warning(yogurt, 12, config)
        assert result.severity == SEVERITY_WARNING
        assert result.exceeded_threshold == 3.0

    @pytest.mark.parametrize("floor", [None, float("nan"), float("inf")])
    def test_unusable_floor_disables_floor(self, yogurt, floor):
        config = ShelfLifeWarningConfig(minimum_quantity_threshold=floor)
        result = analyze_shelf_life_warning(yogurt, 4, config)

        assert result.should_show_warning
        assert result.severity == SEVERITY_INFO

    def test_missing_override_maps(self, yogurt):
        config = ShelfLifeWarningConfig(category_thresholds=None, item_thresholds=None)
        assert get_warning_threshold(yogurt, config) == 3.0


class TestWarningQuantities:
    """Test that messages state the purchased quantity exactly"""

    @pytest.mark.parametrize("quantity, rendered", [
        (1234567, "1234567"),
        (3e6, "3000000"),
        (15.0, "15"),
        (15.0000001, "15.0000001"),
        (12.75, "12.75"),
    ])
    def test_quantity_rendering(self, yogurt, quantity, rendered):
        message = get_shelf_life_warning_message(yogurt, quantity)
        assert f" {rendered} units" in message
        assert "e+" not in message
