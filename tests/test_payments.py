import unittest
from decimal import Decimal

from polypay.models.payment_method import PaymentMethod
from polypay.services.payment_processor import (
    CardPayment,
    CryptoPayment,
    compute_crypto_amount,
)
from fakes import CHARGE, VALID_WALLET, FakeFXService, FakeRateService


class TestCardPayment(unittest.TestCase):

    def test_sixteen_digit_card_is_valid(self):
        card = CardPayment("4000111122223333", "123", 2028)
        self.assertTrue(card.validate_details())

    def test_other_lengths_are_invalid(self):
        for number in ("400011112222333", "40001111222233334", "4000"):
            with self.subTest(number=number):
                self.assertFalse(CardPayment(number, "123", 2028).validate_details())

    def test_validation_is_repeatable(self):
        card = CardPayment("4000111122223333", "123", 2028)
        results = {card.validate_details() for _ in range(5)}
        self.assertEqual(results, {True})
        self.assertEqual(card.card_number, "4000111122223333")

    def test_empty_card_number_rejected(self):
        with self.assertRaises(ValueError):
            CardPayment("", "123", 2028)

    def test_method(self):
        self.assertEqual(CardPayment("4000111122223333", "123", 2028).method, PaymentMethod.CARD)


class TestCardExecution(unittest.IsolatedAsyncioTestCase):

    async def test_returns_visa_transaction_id(self):
        card = CardPayment("4000111122223333", "123", 2028)
        txn = await card.execute_transaction(CHARGE)
        self.assertRegex(txn, r"^VISA_CONFIRMED_TXN_[0-9a-f]{4}$")

    async def test_ids_are_fresh(self):
        card = CardPayment("4000111122223333", "123", 2028)
        ids = {await card.execute_transaction(CHARGE) for _ in range(3)}
        self.assertTrue(all(i.startswith("VISA_CONFIRMED_TXN_") for i in ids))


class TestCryptoValidation(unittest.TestCase):

    def setUp(self):
        self.rates = FakeRateService(Decimal("60000"))
        self.fx = FakeFXService(Decimal("18"))

    def test_thirty_chars_is_valid(self):
        btc = CryptoPayment("x" * 30, self.rates, self.fx)
        self.assertTrue(btc.validate_details())

    def test_short_address_is_invalid(self):
        btc = CryptoPayment("x" * 29, self.rates, self.fx)
        self.assertFalse(btc.validate_details())
        self.assertFalse(btc.validate_details())

    def test_validation_does_not_call_services(self):
        CryptoPayment(VALID_WALLET, self.rates, self.fx).validate_details()
        self.assertEqual(self.rates.calls, [])
        self.assertEqual(self.fx.calls, [])


class TestCryptoExecution(unittest.IsolatedAsyncioTestCase):

    async def test_spot_failure_stops_before_conversion(self):
        for failed in (None, Decimal("0")):
            with self.subTest(rate=failed):
                rates = FakeRateService(failed)
                fx = FakeFXService(Decimal("18"))
                btc = CryptoPayment(VALID_WALLET, rates, fx)

                self.assertEqual(await btc.execute_transaction(CHARGE), "BTC_FAIL_API_ERROR")
                self.assertEqual(rates.calls, ["USD"])
                self.assertEqual(fx.calls, [])

    async def test_conversion_failure(self):
        for failed in (None, Decimal("0")):
            with self.subTest(rate=failed):
                rates = FakeRateService(Decimal("60000"))
                fx = FakeFXService(failed)
                btc = CryptoPayment(VALID_WALLET, rates, fx)

                self.assertEqual(await btc.execute_transaction(CHARGE), "ZAR_FAIL_API_ERROR")
                self.assertEqual(fx.calls, [("USD", "ZAR")])

    async def test_tiny_spot_rate_still_confirms(self):
        btc = CryptoPayment(VALID_WALLET, FakeRateService(Decimal("1E-20")), FakeFXService(Decimal("1")))
        txn = await btc.execute_transaction(CHARGE)
        self.assertRegex(txn, r"^BTC_CONFIRMED_TXN_[0-9a-f]{4}$")

    async def test_failure_codes_do_not_follow_target_currency(self):
        rates = FakeRateService(Decimal("60000"))
        fx = FakeFXService(None)
        btc = CryptoPayment(VALID_WALLET, rates, fx, target_currency="eur")

        self.assertEqual(await btc.execute_transaction(CHARGE), "ZAR_FAIL_API_ERROR")
        self.assertEqual(fx.calls, [("USD", "EUR")])

    async def test_success(self):
        rates = FakeRateService(Decimal("60000"))
        fx = FakeFXService(Decimal("18"))
        btc = CryptoPayment(VALID_WALLET, rates, fx)

        txn = await btc.execute_transaction(CHARGE)

        self.assertRegex(txn, r"^BTC_CONFIRMED_TXN_[0-9a-f]{4}$")
        self.assertEqual(rates.calls, ["USD"])
        self.assertEqual(fx.calls, [("USD", "ZAR")])


class TestComputeCryptoAmount(unittest.TestCase):

    def test_chained_rates(self):
        conversion = compute_crypto_amount(CHARGE, Decimal("60000"), Decimal("18"))
        self.assertEqual(conversion.combined_rate, Decimal("1080000"))
        self.assertEqual(conversion.crypto_amount, Decimal("0.0046296296"))

    def test_tiny_rates_keep_every_digit(self):
        conversion = compute_crypto_amount(CHARGE, Decimal("1E-20"), Decimal("1"))
        self.assertEqual(conversion.crypto_amount, Decimal("500000000000000000000000.0000000000"))

    def test_non_positive_rates_rejected(self):
        with self.assertRaises(ValueError):
            compute_crypto_amount(CHARGE, Decimal("0"), Decimal("18"))


if __name__ == '__main__':
    unittest.main()
