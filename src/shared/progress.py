import sys
import time


class SingleLineRenderer:
    """Перерисовка одной строки консоли через возврат каретки."""

    def __init__(self, stream=None) -> None:
        self._stream = stream
        self._width = 0

    @property
    def stream(self):
        return self._stream or sys.stdout

    def show(self, msg: str) -> None:
        # Хвост предыдущей, более длинной строки затирается пробелами
        tail = ' ' * max(0, self._width - len(msg))
        self.stream.write(f'\r{msg}{tail}')
        self.stream.flush()
        self._width = len(msg)

    def finish(self) -> None:
        if self._width:
            self.stream.write('\n')
            self.stream.flush()
            self._width = 0


class ConsoleProgress:
    """Прогресс по версиям: обработано / всего и текущая версия."""

    def __init__(
        self,
        total: int,
        label: str = 'Processed',
        renderer: SingleLineRenderer | None = None,
    ) -> None:
        self.total = max(0, int(total))
        self.done = 0
        self.skipped = 0
        self.start = time.monotonic()
        self.label = label
        self._renderer = renderer or SingleLineRenderer()

    def _render(self, current: str) -> None:
        elapsed = max(1e-6, time.monotonic() - self.start)
        rate = (self.done + self.skipped) / elapsed
        msg = f'{self.label}: {self.done}/{self.total} ({current}) | {rate:4.1f}/s'
        if self.skipped:
            msg += f' | skipped {self.skipped}'
        self._renderer.show(msg)

    def step(self, current: str) -> None:
        self.done = min(self.total, self.done + 1)
        self._render(current)

    def skip(self, current: str) -> None:
        self.skipped += 1
        self._render(current)

    def close(self) -> None:
        self._renderer.finish()
