import unittest

from psicocompany.validators import (
    format_phone,
    validate_email,
    validate_full_name,
    validate_password,
    validate_phone,
)


class EmailValidatorTests(unittest.TestCase):
    def test_accepts_well_formed_addresses(self):
        for value in ["ana@example.com", "joao.silva@psico.com.br", "a+b@x.io"]:
            self.assertTrue(validate_email(value), value)

    def test_rejects_malformed_addresses(self):
        for value in [
            "",
            "ana",
            "ana.example.com",
            "ana@",
            "ana@example",
            "@example.com",
            "ana @example.com",
            "ana@@example.com",
        ]:
            self.assertFalse(validate_email(value), value)

    def test_rejects_trailing_newline(self):
        self.assertFalse(validate_email("ana@example.com\n"))
        self.assertFalse(validate_email("ana@example.com\n\n"))


class PasswordValidatorTests(unittest.TestCase):
    def test_rejects_short_passwords(self):
        for value in ["", "a", "12345"]:
            self.assertEqual(
                validate_password(value), "A senha deve ter no mínimo 6 caracteres"
            )

    def test_accepts_six_or_more(self):
        self.assertIsNone(validate_password("123456"))
        self.assertIsNone(validate_password("uma senha longa"))


class FullNameValidatorTests(unittest.TestCase):
    def test_required(self):
        self.assertEqual(validate_full_name("   "), "Nome completo é obrigatório")

    def test_minimum_length_ignores_surrounding_space(self):
        self.assertEqual(
            validate_full_name("  Jo "), "Nome deve ter pelo menos 3 caracteres"
        )
        self.assertIsNone(validate_full_name("Ana"))


class PhoneTests(unittest.TestCase):
    def test_formats_mobile_number(self):
        self.assertEqual(format_phone("11912345678"), "(11) 91234-5678")

    def test_formats_landline_number(self):
        self.assertEqual(format_phone("1133334444"), "(11) 3333-4444")

    def test_strips_punctuation_before_formatting(self):
        self.assertEqual(format_phone("(11) 91234-5678"), "(11) 91234-5678")
        self.assertEqual(format_phone("+11 9 1234 5678"), "(11) 91234-5678")

    def test_other_lengths_return_digits(self):
        self.assertEqual(format_phone("12-34"), "1234")
        self.assertEqual(format_phone(""), "")

    def test_validate_phone(self):
        self.assertIsNone(validate_phone(""))
        self.assertIsNone(validate_phone("11912345678"))
        self.assertIsNone(validate_phone("(11) 3333-4444"))
        self.assertIsNotNone(validate_phone("123"))

    def test_only_ascii_digits_count(self):
        arabic_indic = "\u0661\u0661\u0669\u0661\u0662\u0663\u0664\u0665\u0666\u0667\u0668"
        self.assertEqual(format_phone(arabic_indic), "")
        self.assertIsNotNone(validate_phone(arabic_indic))


if __name__ == "__main__":
    unittest.main()
