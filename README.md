# chatplugins

The logic behind a set of group-chat bot features, free of any particular chat
protocol. Each module takes plain values (user ids, group ids, message text,
timestamps) and gives back plain values or ready-to-send text, so it can be
wired into whatever bot framework you use.

## Modules

| Module | What it does |
| --- | --- |
| `chatplugins.runcode` | Parses `>runcode` / `>runcoderaw` commands into a `RunRequest` (`parse_command`) and trims long program output to 30 lines or about 1000 characters (`cut_too_long`). |
| `chatplugins.reborn` | "Reincarnation" roll: weighted country and gender picks from a rate table (`load_rates`, `Reborn`). |
| `chatplugins.wtf` | A fixed table of fortune-style generators; builds their request URLs and queries them (`get_wtf`, `list_text`, `Wtf.url`, `Wtf.predict`). |
| `chatplugins.sleep` | Good-night / good-morning tracking in SQLite with position and elapsed time (`SleepDB`, `morning_reply`, `evening_reply`, `is_morning`, `is_evening`). |
| `chatplugins.score` | Daily sign-in with scores capped at 120, levels and a top-N ranking (`ScoreDB`, `sign_in`, `SignInResult`, `get_level`, `get_hour_word`). |
| `chatplugins.thesaurus` | Keyword-to-random-reply dictionary (`load_thesaurus`, `Thesaurus`). |
| `chatplugins.tiangou` | Random entries from a diary database (`TiangouDB`). |
| `chatplugins.wordle` | Five-, six- and seven-letter word guessing with PNG boards (`WordleGame`, `score_guess`, `load_wordlist`, `class_for`). |
| `chatplugins.wordcount` | Hot-word counting of Chinese words with stop words (`WordCounter`, `rank_by_word_count`, `clamp_message_count`). |
| `chatplugins.tarot` | Tarot draws, card lookup and spreads (`load_deck`, `TarotDeck`, `parse_draw_command`). |
| `chatplugins.shadiao` | Fetches short texts from a handful of web APIs (`ShadiaoClient`, `extract_text`, `parse_luther`). |
| `chatplugins.vtb` | A three-level VTuber quotation database in SQLite, filled from the vtbkeyboard API (`VtbDB`, `fetch_vtb_list`, `fetch_vtb_page`). |
| `chatplugins.vtbquote` | The numbered-menu dialogue that walks the quotation database, and recording download helpers (`QuoteSession`, `escape_record_url`, `record_filename`, `download_record`). |
| `chatplugins.ymgal` | Galgame picture sets: page parsing, SQLite storage, random pick and search, scraping updates (`YmgalDB`, `parse_picset`, `format_entry`, `update_pictures`). |

## Examples

Parsing a run command and trimming output:

```python
from chatplugins.runcode import cut_too_long, parse_command

request = parse_command(">runcode python print(1)")
print(request.language, request.block)
text = cut_too_long(program_output)
```

Daily sign-in:

```python
from datetime import datetime
from chatplugins.score import ScoreDB, sign_in

with ScoreDB("score.db") as db:
    result = sign_in(db, 10001, datetime.now())
    if result.already_signed:
        print("今天你已经签到过了！")
    print(result.hour_word, result.score, result.level, result.progress_text)
    print(db.top_scores(10))
```

Good night and good morning in a group:

```python
from datetime import datetime
from chatplugins.sleep import SleepDB, evening_reply

with SleepDB("sleep.db") as db:
    position, awake = db.sleep(20001, 10001, datetime.now())
    print(evening_reply(position, awake))
```

A wordle round:

```python
from chatplugins.wordle import WordleGame, WordleError

game = WordleGame("apple", dictionary)
try:
    result = game.guess("angle")
    print(result.won, result.exhausted, result.states)
except WordleError as err:
    print(err)
png_bytes = game.render()
```

Counting hot words:

```python
from chatplugins.wordcount import WordCounter

counter = WordCounter(stopwords)
counter.add(["你好", "今天", "你好"])
print(counter.top(20))
```

Walking the quotation menu:

```python
from chatplugins.vtb import VtbDB
from chatplugins.vtbquote import QuoteSession

with VtbDB("vtb.db") as db:
    session = QuoteSession(db)
    print(session.start())
    for reply in session.answer("0"):
        print(reply)
```

## What the package does not do

- It does not connect to any chat service, listen for messages or send them;
  callers pass in text and ids and deliver the returned text themselves.
- `runcode` only parses commands and trims output; it does not run code.
- `score` keeps scores but draws no sign-in card, and `wordcount` counts words
  but draws no chart and does not split messages into words: callers supply
  the words.
- Data files (country rates, tarot cards and formations, reply dictionaries,
  word lists, stop words, the diary database) are not bundled; pass their paths
  to the loaders.

## Tests

The test suite uses pytest; install the `test` extra to get it.