import unittest
from datetime import date
from decimal import Decimal

from services.errors import ValidationError
from utils.validators import (
    ENTERO_MAX,
    LIBRAS_MAX,
    normalizar_paginacion,
    parse_entero_positivo,
    parse_fecha,
    parse_libras,
)


class TestParseLibras(unittest.TestCase):
    def test_validas(self):
        self.assertEqual(parse_libras("12.345"), Decimal("12.35"))
        self.assertEqual(parse_libras(7), Decimal("7.00"))
        self.assertEqual(parse_libras(LIBRAS_MAX), LIBRAS_MAX)

    def test_no_finitas(self):
        for valor in ("NaN", "nan", float("nan"), "Infinity", float("inf"), float("-inf"), "sNaN"):
            with self.assertRaises(ValidationError, msg=repr(valor)) as ctx:
                parse_libras(valor)
            self.assertIn("libras", ctx.exception.errors)

    def test_fuera_de_rango(self):
        for valor in ("100000000", 10**30, "1e30", "0.004", "-1", True):
            with self.assertRaises(ValidationError, msg=repr(valor)):
                parse_libras(valor)


class TestParseEnteroPositivo(unittest.TestCase):
    def test_validos(self):
        self.assertEqual(parse_entero_positivo("15", "x"), 15)
        self.assertEqual(parse_entero_positivo(3.0, "x"), 3)
        self.assertEqual(parse_entero_positivo(ENTERO_MAX, "x"), ENTERO_MAX)

    def test_invalidos(self):
        for valor in (float("inf"), float("nan"), 2.5, 0, -1, "abc", None, True, ENTERO_MAX + 1, 10**30):
            with self.assertRaises(ValidationError, msg=repr(valor)) as ctx:
                parse_entero_positivo(valor, "libras_totales")
            self.assertIn("libras_totales", ctx.exception.errors)

    def test_maximo_propio(self):
        with self.assertRaises(ValidationError):
            parse_entero_positivo(11, "x", maximo=10)


class TestOtros(unittest.TestCase):
    def test_fecha(self):
        self.assertEqual(parse_fecha("2026-10-18"), date(2026, 10, 18))
        with self.assertRaises(ValidationError):
            parse_fecha("2026-13-01")

    def test_paginacion(self):
        self.assertEqual(normalizar_paginacion(None, None), (1, 20))
        for page, limit in ((0, 10), (10**30, 10), (1, 101), (1, 0)):
            with self.assertRaises(ValidationError):
                normalizar_paginacion(page, limit)


if __name__ == "__main__":
    unittest.main()
