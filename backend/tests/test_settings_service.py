import unittest

from retailpos import create_app
from retailpos.extensions import db
from retailpos.models import StoreSettings, Product
from retailpos.services import settings_service
from retailpos.services.stock_service import classify_stock, stock_notifications
from retailpos.validation import ValidationError


class SettingsServiceTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = create_app({
            "SECRET_KEY": "test",
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "SQLALCHEMY_TRACK_MODIFICATIONS": False,
            "TESTING": True,
        })
        cls.ctx = cls.app.app_context()
        cls.ctx.push()
        db.create_all()

    @classmethod
    def tearDownClass(cls):
        db.session.remove()
        db.drop_all()
        cls.ctx.pop()

    def setUp(self):
        db.session.query(Product).delete()
        db.session.query(StoreSettings).delete()
        db.session.commit()

    def test_first_read_creates_defaults(self):
        self.assertIsNone(db.session.get(StoreSettings, StoreSettings.SINGLETON_ID))

        settings = settings_service.get_settings()

        self.assertEqual(settings.id, StoreSettings.SINGLETON_ID)
        self.assertEqual(settings.low_stock_threshold, 5)
        self.assertEqual(settings.moderate_stock_threshold, 10)
        self.assertEqual(settings.high_stock_threshold, 20)
        self.assertFalse(settings.loyalty_points_enabled)
        self.assertEqual(settings.loyalty_points_per_dollar, 1.0)
        self.assertEqual(db.session.query(StoreSettings).count(), 1)

    def test_repeated_reads_keep_single_row(self):
        settings_service.get_settings()
        settings_service.get_settings()
        self.assertEqual(db.session.query(StoreSettings).count(), 1)

    def test_update_persists_valid_values(self):
        settings_service.update_settings({
            "low_stock_threshold": 3,
            "moderate_stock_threshold": 8,
            "high_stock_threshold": 30,
            "loyalty_points_enabled": True,
            "loyalty_points_per_dollar": 2.5,
        })

        db.session.expire_all()
        stored = db.session.get(StoreSettings, StoreSettings.SINGLETON_ID)
        self.assertEqual(
            (stored.low_stock_threshold, stored.moderate_stock_threshold, stored.high_stock_threshold),
            (3, 8, 30),
        )
        self.assertTrue(stored.loyalty_points_enabled)
        self.assertEqual(stored.loyalty_points_per_dollar, 2.5)

    def test_non_ascending_thresholds_rejected_and_not_persisted(self):
        settings_service.get_settings()

        with self.assertRaises(ValidationError):
            settings_service.update_settings({
                "low_stock_threshold": 10,
                "moderate_stock_threshold": 5,
            })

        db.session.expire_all()
        stored = db.session.get(StoreSettings, StoreSettings.SINGLETON_ID)
        self.assertEqual(stored.low_stock_threshold, 5)
        self.assertEqual(stored.moderate_stock_threshold, 10)

    def test_equal_thresholds_rejected(self):
        with self.assertRaises(ValidationError):
            settings_service.update_settings({"moderate_stock_threshold": 20})

    def test_omitted_fields_keep_stored_values(self):
        settings_service.update_settings({"loyalty_points_enabled": True, "high_stock_threshold": 50})
        settings_service.update_settings({"low_stock_threshold": 2})

        db.session.expire_all()
        stored = db.session.get(StoreSettings, StoreSettings.SINGLETON_ID)
        self.assertEqual(stored.low_stock_threshold, 2)
        self.assertEqual(stored.moderate_stock_threshold, 10)
        self.assertEqual(stored.high_stock_threshold, 50)
        self.assertTrue(stored.loyalty_points_enabled)

    def test_rate_below_minimum_rejected(self):
        with self.assertRaises(ValidationError):
            settings_service.update_settings({"loyalty_points_per_dollar": 0.05})

        settings_service.update_settings({"loyalty_points_per_dollar": 0.1})
        self.assertEqual(settings_service.get_settings().loyalty_points_per_dollar, 0.1)

    def test_malformed_values_rejected(self):
        for patch in (
            {"low_stock_threshold": "abc"},
            {"low_stock_threshold": 2.5},
            {"low_stock_threshold": -1},
            {"loyalty_points_enabled": "maybe"},
            {"loyalty_points_per_dollar": "lots"},
            {"tax_rate": 5},
        ):
            with self.subTest(patch=patch):
                with self.assertRaises(ValidationError):
                    settings_service.update_settings(patch)

    def test_string_booleans_accepted(self):
        settings = settings_service.update_settings({"loyalty_points_enabled": "true"})
        self.assertTrue(settings.loyalty_points_enabled)
        settings = settings_service.update_settings({"loyalty_points_enabled": "off"})
        self.assertFalse(settings.loyalty_points_enabled)


class StockClassificationTests(unittest.TestCase):
    def setUp(self):
        self.settings = StoreSettings(
            low_stock_threshold=5,
            moderate_stock_threshold=10,
            high_stock_threshold=20,
        )

    def test_bands(self):
        cases = [
            (0, "out"),
            (1, "low"),
            (4, "low"),
            (5, "moderate"),
            (9, "moderate"),
            (10, "sufficient"),
            (19, "sufficient"),
            (20, "high"),
            (500, "high"),
        ]
        for quantity, expected in cases:
            with self.subTest(quantity=quantity):
                self.assertEqual(classify_stock(quantity, self.settings), expected)

    def test_zero_low_threshold_has_no_low_band(self):
        self.settings.low_stock_threshold = 0
        self.assertEqual(classify_stock(0, self.settings), "out")
        self.assertEqual(classify_stock(1, self.settings), "moderate")


class StockNotificationTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = create_app({
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "TESTING": True,
        })
        cls.ctx = cls.app.app_context()
        cls.ctx.push()
        db.create_all()

    @classmethod
    def tearDownClass(cls):
        db.session.remove()
        db.drop_all()
        cls.ctx.pop()

    def test_out_and_low_products_reported(self):
        db.session.add_all([
            Product(name="Empty", price_cents=100, quantity=0),
            Product(name="Scarce", price_cents=100, quantity=2),
            Product(name="Almost", price_cents=100, quantity=4),
            Product(name="Plenty", price_cents=100, quantity=5),
        ])
        db.session.commit()

        report = stock_notifications()

        self.assertEqual(report["low_stock_threshold"], 5)
        self.assertEqual([p["name"] for p in report["out_of_stock"]], ["Empty"])
        self.assertEqual([p["name"] for p in report["low_stock"]], ["Scarce", "Almost"])
        self.assertEqual(report["count"], 3)
        self.assertEqual({p["stock_level"] for p in report["low_stock"]}, {"low"})
        self.assertEqual(report["out_of_stock"][0]["stock_level"], "out")


if __name__ == "__main__":
    unittest.main()
