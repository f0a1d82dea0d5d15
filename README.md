# flutelistener

A terminal companion for practising the flute. It listens to the default
audio input device, estimates the pitch being played, and either shows what
it hears or walks you through a tune note by note.

## Installation

```
pip install flutelistener
```

You need a working audio input device. The interface uses the `curses`
module of the standard library, so it runs in a POSIX terminal. Audio is
captured through pygame.

## Usage

Start it with no arguments to open the debug view:

```
flutelistener
```

Give it a tune file to open the tutor view:

```
flutelistener tune.txt
```

### Keys

| Key | Action                                  |
|-----|-----------------------------------------|
| `h` | help                                    |
| `d` | debug and visualization                 |
| `t` | tutor (reloads the tune and starts over) |
| `q` | quit                                    |

### Debug view

The debug view shows:

- the peak frequency of the spectrum;
- the fundamental frequency, estimated with a harmonic product spectrum;
- the note nearest to that fundamental;
- the sample rate and the maximum magnitude;
- a history of the notes heard, the latest first and in bold;
- a plot of the spectrum up to 1500 Hz and a plot of the raw waveform.

Audio is analysed in windows of 4096 samples taken from the first channel.
The display is refreshed four times a second with the latest window. A note
is added to the history when the maximum magnitude is above 5 and the note
differs from the last one recorded.

### Tutor view

A tune file holds one phrase per line. The notes in a phrase are separated by
commas, with no spaces. The accepted note names are
`A A# B B# C C# D D# E E# F F# G G#`. Any other entry is rejected when the
file is loaded.

```
C,D,E,F
G,A,B,C
```

The note you are expected to play is shown in bold, and the notes still to
come are dimmed. When the expected note is heard with a maximum magnitude
above 10, the tutor moves to the next note. Line breaks count as rests and
are skipped. When the tune is finished, a congratulation message appears.
Without a tune file, the tutor view shows the key help and a reminder to pass
a file.

### Logging and data directory

Log records go to `flute-listener.log` in the application's local data
directory. Set `FLUTE_LISTENER_DATA` to use another directory, and
`FLUTE_LISTENER_LOGLEVEL` (for example `DEBUG`) to choose the log level. The
default log level is `ERROR`. The log file is recreated on every start.

## Library use

The analysis and the tutor can be used without the interface:

```python
import numpy as np

from flutelistener.audio import analyze_samples, get_note_from_frequency
from flutelistener.music import Tutor, parse_musical_sounds

rate = 44100
t = np.arange(4096) / rate
data = analyze_samples(np.sin(2 * np.pi * 440.0 * t), rate)
print(data.fundamental_frequency, get_note_from_frequency(data.fundamental_frequency))

tutor = Tutor(parse_musical_sounds("C,D,E\nF,G"))
tutor.advance("C")
print(tutor.current_note_index, tutor.is_complete(), tutor.lines())
```

`load_tutor(path)` reads a tune file and returns a `Tutor` for it.
`AudioListener` collects samples passed to `feed()` into windows and puts a
`FreqData` for each full window on a queue. `run()` captures from the
default input device until the stop event is set.

## Limitations

Notes are identified by name only. The octave is not tracked, so a tune
cannot distinguish a C4 from a C5. The tutor only follows the order of notes,
not their rhythm or duration.