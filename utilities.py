import inspect
import time
from datetime import datetime, timezone
import os
from pathlib import PurePosixPath
from typing import Set

import psutil
from rich import print as _print

def Print(logType: str, message: str) -> None:
    """
    Prints a log message with timestamp, function name, symbols wrapping the logType, and the message.
    """
    try:
        # Mapping of logType to symbols
        logTypeSymbols = {
            'SUCCESS': ('^^^', '^^^'),
            'FAILURE': ('###', '###'),
            'STATE': ('~~~', '~~~'),
            'INFO': ('---', '---'),
            'IMPORTANT': ('===', '==='),
            'CRITICAL': ('***', '***'),
            'EXCEPTION': ('!!!', '!!!'),
            'WARNING': ('(((', ')))'),
            'DEBUG': ('[[[', ']]]'),
            'ATTEMPT': ('???', '???'),
            'STARTING': ('>>>', '>>>'),
            'PROGRESS': ('vvv', 'vvv'),
            'COMPLETED': ('<<<', '<<<'),
            'HEADER': ('###', '###'),
        }

        # Mapping of logType to styles
        logTypeStyles = {
            'SUCCESS': 'green',
            'FAILURE': 'red bold',
            'STATE': 'cyan',
            'INFO': 'blue',
            'IMPORTANT': 'magenta',
            'CRITICAL': 'red bold',
            'EXCEPTION': 'red bold',
            'WARNING': 'yellow',
            'DEBUG': 'white',
            'ATTEMPT': 'cyan',
            'STARTING': 'green',
            'PROGRESS': 'blue',
            'COMPLETED': 'green',
            'HEADER': 'magenta bold',
        }

        current_time = time.time()
        timestamp = datetime.fromtimestamp(current_time, tz=timezone.utc).isoformat(timespec='microseconds') + 'Z'

        logTypeUpper = logType.upper()
        before_symbol, after_symbol = logTypeSymbols.get(logTypeUpper, ('', ''))

        formattedLogType = f"{before_symbol} {logTypeUpper} {after_symbol}"

        style = logTypeStyles.get(logTypeUpper, '')
        if style:
            formattedLogType = f"[{style}]{formattedLogType}[/{style}]"

        # Get the caller function name
        caller_frame = inspect.stack()[1]
        function_name = caller_frame.function

        # If the caller is Print, get the next frame
        if function_name == 'Print':
            caller_frame = inspect.stack()[2]
            function_name = caller_frame.function

        functionNamePadding = 40
        paddedFunctionName = function_name.ljust(functionNamePadding)

        output_line = f"{timestamp} {formattedLogType} {paddedFunctionName} {message}"

        _print(output_line)

    except Exception as e:
        error_message = f"Something went wrong when attempting to print.\nError: {e}"
        print(error_message)


def format_file_size(size_bytes: int) -> str:
    """
    Human-readable size with 1024 steps, e.g. '0 Bytes', '1.5 KB', '2 MB'.
    """
    if size_bytes <= 0:
        return '0 Bytes'
    units = ['Bytes', 'KB', 'MB', 'GB']
    exponent = 0
    while size_bytes >= 1024 ** (exponent + 1) and exponent < len(units) - 1:
        exponent += 1
    value = round(size_bytes / (1024 ** exponent), 2)
    # Drop trailing zeros: 2.00 -> 2, 1.50 -> 1.5
    return f"{value:g} {units[exponent]}"


def unique_name(name: str, taken: Set[str]) -> str:
    """Return name, or 'stem (n).ext' with the lowest n not in taken."""
    if name not in taken:
        return name
    path = PurePosixPath(name)
    counter = 1
    while True:
        candidate = f"{path.stem} ({counter}){path.suffix}"
        if candidate not in taken:
            return candidate
        counter += 1


def CPU_and_Mem_usage() -> str:
    """
    Returns a string with the CPU usage and memory usage of the current process.
    """
    current_process = psutil.Process(os.getpid())
    cpu_usage = psutil.cpu_percent(interval=1)
    memory_info = current_process.memory_info()
    memory_usage_mb = memory_info.rss / (1024 ** 2)
    return f"CPU Usage: {cpu_usage}%, Process Memory Usage: {memory_usage_mb:.2f} MB"
