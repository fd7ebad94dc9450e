"""Tests for key events and input sources."""

import threading

import pytest

from overlay_menu.hardware import gpio
from overlay_menu.hardware.gpio import PIN_A, PIN_D, GpioInput
from overlay_menu.hardware.keys import EventType, InputEvent, Key
from overlay_menu.hardware.virtual_input import VirtualInput


class TestKeys:
    """Key names and event constructors."""

    @pytest.mark.parametrize(
        "name,key",
        [
            ("down", Key.DOWN),
            ("U", Key.UP),
            ("a", Key.CONFIRM),
            ("Return", Key.CONFIRM),
            ("b", Key.BACK),
            ("q", Key.ESCAPE),
            ("menu", Key.ESCAPE),
        ],
    )
    def test_from_name(self, name, key):
        assert Key.from_name(name) is key

    def test_unknown_key_name(self):
        with pytest.raises(ValueError):
            Key.from_name("start")

    def test_event_constructors(self):
        assert InputEvent.key_down(Key.UP) == InputEvent(EventType.KEY_DOWN, Key.UP)
        assert InputEvent.quit().key is None


class TestVirtualInput:
    """Queued virtual presses."""

    def test_events_polled_in_order(self):
        source = VirtualInput([InputEvent.key_down(Key.UP)])
        source.inject_key(Key.DOWN)
        source.inject_quit()

        assert source.poll() == InputEvent.key_down(Key.UP)
        assert source.poll() == InputEvent.key_down(Key.DOWN)
        assert source.poll().type is EventType.QUIT
        assert source.poll() is None

    def test_inject_keys_and_clear(self):
        source = VirtualInput()
        source.inject_keys([Key.LEFT, Key.RIGHT])
        assert source.pending() == 2

        source.clear()

        assert source.pending() == 0

    def test_key_repeat_round_trip(self):
        source = VirtualInput()

        source.set_key_repeat(0.5, 0.03)

        assert source.get_key_repeat() == (0.5, 0.03)

    def test_inject_from_threads(self):
        source = VirtualInput()
        threads = [
            threading.Thread(target=source.inject_keys, args=([Key.UP] * 50,))
            for _ in range(4)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert source.pending() == 200


class FakeButtons:
    def __init__(self):
        self.pressed = set()

    def __call__(self, pin):
        return pin in self.pressed


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def buttons(mocker):
    fake = FakeButtons()
    mocker.patch("overlay_menu.hardware.gpio.is_pressed", side_effect=fake)
    return fake


@pytest.fixture
def clock():
    return FakeClock()


class TestGpioInput:
    """Falling-edge detection and key repeat on GPIO buttons."""

    def test_press_emits_one_event(self, buttons, clock):
        source = GpioInput(clock=clock, setup=False)

        buttons.pressed.add(PIN_D)

        assert source.poll() == InputEvent.key_down(Key.DOWN)
        assert source.poll() is None

    def test_held_button_without_repeat(self, buttons, clock):
        source = GpioInput(clock=clock, setup=False)
        buttons.pressed.add(PIN_D)
        source.poll()

        clock.now = 5.0

        assert source.poll() is None

    def test_held_direction_repeats(self, buttons, clock):
        source = GpioInput(clock=clock, setup=False)
        source.set_key_repeat(0.5, 0.1)
        buttons.pressed.add(PIN_D)
        assert source.poll() == InputEvent.key_down(Key.DOWN)

        clock.now = 0.4
        assert source.poll() is None
        clock.now = 0.5
        assert source.poll() == InputEvent.key_down(Key.DOWN)
        clock.now = 0.55
        assert source.poll() is None
        clock.now = 0.65
        assert source.poll() == InputEvent.key_down(Key.DOWN)

    def test_confirm_never_repeats(self, buttons, clock):
        source = GpioInput(clock=clock, setup=False)
        source.set_key_repeat(0.5, 0.1)
        buttons.pressed.add(PIN_A)
        assert source.poll() == InputEvent.key_down(Key.CONFIRM)

        clock.now = 2.0

        assert source.poll() is None

    def test_release_and_press_again(self, buttons, clock):
        source = GpioInput(clock=clock, setup=False)
        buttons.pressed.add(PIN_A)
        source.poll()
        buttons.pressed.clear()
        assert source.poll() is None

        buttons.pressed.add(PIN_A)

        assert source.poll() == InputEvent.key_down(Key.CONFIRM)

    def test_button_held_at_start_is_ignored(self, buttons, clock):
        buttons.pressed.add(PIN_A)

        source = GpioInput(clock=clock, setup=False)

        assert source.poll() is None

    def test_setup_configures_pins(self, buttons, mocker):
        setup = mocker.patch("overlay_menu.hardware.gpio.setup_gpio")

        GpioInput()

        setup.assert_called_once_with()

    def test_close_cleans_up(self, buttons, mocker):
        cleanup = mocker.patch("overlay_menu.hardware.gpio.cleanup")

        GpioInput(setup=False).close()

        cleanup.assert_called_once_with()

    def test_is_pressed_active_low(self, mocker):
        mocker.patch.object(gpio, "read_button", return_value=gpio.GPIO.LOW)

        assert gpio.is_pressed(PIN_A) is True
