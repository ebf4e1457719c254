import unittest

from chip8_tracer.arch.chip8.machine import Chip8Machine
from chip8_tracer.common.errors import BoundsViolationError


def program(*words):
    return b"".join(word.to_bytes(2, "big") for word in words)


class TestChip8KeypadInstructions(unittest.TestCase):
    def setUp(self):
        self.machine = Chip8Machine()

    def _load(self, *words):
        self.machine.load_program(program(*words))
        self.machine.reset()

    def test_sknp_skips_when_not_pressed(self):
        self._load(0x6A07, 0xEAA1)
        self.machine.step()
        self.machine.step()
        self.assertEqual(self.machine.state.pc, 0x206)

    def test_sknp_no_skip_when_pressed(self):
        self._load(0x6A07, 0xEAA1)
        self.machine.keypad.set_key(7, True)
        self.machine.step()
        self.machine.step()
        self.assertEqual(self.machine.state.pc, 0x204)

    def test_sknp_key_register_out_of_range(self):
        self._load(0x6A10, 0xEAA1)
        self.machine.step()
        with self.assertRaises(BoundsViolationError):
            self.machine.step()
        self.assertEqual(self.machine.state.pc, 0x202)

    def test_wait_for_key_stalls(self):
        self._load(0x6355, 0xF30A)
        self.machine.step()
        for _ in range(5):
            self.machine.step()
            self.assertEqual(self.machine.state.pc, 0x202)
            self.assertEqual(self.machine.state.v[3], 0x55)

    def test_wait_for_key_resumes_once(self):
        self._load(0xF30A, 0x6001)
        self.machine.step()
        self.assertEqual(self.machine.state.pc, 0x200)
        self.machine.keypad.set_key(0xB, True)
        self.machine.step()
        self.assertEqual(self.machine.state.v[3], 0xB)
        self.assertEqual(self.machine.state.pc, 0x202)

    def test_wait_for_key_picks_lowest_index(self):
        self._load(0xF10A)
        self.machine.keypad.set_key(0xE, True)
        self.machine.keypad.set_key(0x4, True)
        self.machine.step()
        self.assertEqual(self.machine.state.v[1], 0x4)

if __name__ == '__main__':
    unittest.main()
