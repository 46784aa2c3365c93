from crux.cli.interrupt.handler import Abortable, CancellationBridge

__all__ = ["Abortable", "CancellationBridge"]
