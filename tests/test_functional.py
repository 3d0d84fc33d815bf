# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Functional tests for the puzzle generator."""

import io
import json
import os
import random
import sys
import shutil
import tempfile
import unittest
from unittest import mock

import yaml

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from config import GeneratorConfig
from dictionary_index import DictionaryIndex, DictionaryProvider
from models import (
    CrosswordPuzzle, PuzzleInputError, SoletraPuzzle, SudokuPuzzle,
    WordSearchPuzzle, puzzle_from_dict,
)
from puzzle_generator import (
    PuzzleGenerator, format_puzzle, load_word_file, main, theme_words_from,
)
from validator import validate_puzzle


CROSSWORD_WORDS = [
    {'word': 'casa', 'clue': 'Lugar onde se mora'},
    {'word': 'sala', 'clue': 'Cômodo de estar'},
    {'word': 'mesa', 'clue': 'Móvel com tampo'},
    {'word': 'cama', 'clue': 'Móvel para dormir'},
    {'word': 'porta', 'clue': 'Abertura de entrada'},
    {'word': 'janela', 'clue': 'Abertura para a luz'},
    {'word': 'livro', 'clue': 'Conjunto de páginas'},
    {'word': 'papel', 'clue': 'Folha para escrever'},
    {'word': 'caixa', 'clue': 'Recipiente'},
    {'word': 'terra', 'clue': 'Nosso planeta'},
    {'word': 'amor', 'clue': 'Sentimento'},
    {'word': 'vida', 'clue': 'Existência'},
]


class TestPuzzleGenerator(unittest.TestCase):
    """End-to-end generation for each game type."""

    def test_crossword(self):
        """Test a crossword is laid out and validated."""
        config = GeneratorConfig(
            game_type="crossword", difficulty="easy",
            title="Casa", description="Palavras da casa", seed=1,
        )

        puzzle = PuzzleGenerator(config).generate(CROSSWORD_WORDS)

        self.assertIsInstance(puzzle, CrosswordPuzzle)
        self.assertEqual((puzzle.width, puzzle.height), (9, 9))
        self.assertGreaterEqual(len(puzzle.words), 2)
        self.assertTrue(validate_puzzle(puzzle).valid)
        clues = {c.value for g in puzzle.clue_groups for c in g.clues}
        self.assertTrue(clues <= {w['clue'] for w in CROSSWORD_WORDS})

    def test_crossword_without_words(self):
        """Test a crossword needs candidate words."""
        config = GeneratorConfig(game_type="crossword", seed=1)

        with self.assertRaises(PuzzleInputError):
            PuzzleGenerator(config).generate()

    def test_wordsearch(self):
        """Test a word search places every word that fits."""
        config = GeneratorConfig(
            game_type="wordsearch", difficulty="easy", title="Bichos",
            words=["GATO", "CASA", "SOL"], seed=2,
        )

        puzzle = PuzzleGenerator(config).generate()

        self.assertIsInstance(puzzle, WordSearchPuzzle)
        self.assertEqual(sorted(puzzle.placed_words), ["CASA", "GATO", "SOL"])
        self.assertEqual(len(puzzle.content), 10)

    def test_wordsearch_truncates_to_max_words(self):
        """Test extra words beyond the difficulty maximum are ignored."""
        words = ["GATO", "CASA", "SOL", "AMOR", "VIDA", "MESA", "SALA", "CAMA", "RATO"]
        config = GeneratorConfig(
            game_type="wordsearch", difficulty="easy", title="Muitas", seed=3,
        )

        puzzle = PuzzleGenerator(config).generate(words)

        self.assertLessEqual(len(puzzle.placed_words) + puzzle.dropped_count, 7)

    def test_sudoku(self):
        """Test a Sudoku is generated for the difficulty."""
        config = GeneratorConfig(game_type="sudoku", difficulty="easy", title="Sudoku", seed=4)

        puzzle = PuzzleGenerator(config).generate()

        self.assertIsInstance(puzzle, SudokuPuzzle)
        self.assertGreaterEqual(puzzle.clue_count, 35)
        self.assertLessEqual(puzzle.clue_count, 40)

    def test_soletra_with_letters(self):
        """Test Soletra from fixed letters uses the bundled dictionary."""
        config = GeneratorConfig(
            game_type="soletra", difficulty="easy", title="Soletra",
            letters=list("AERSTOI"), center_letter="E", seed=5,
        )

        puzzle = PuzzleGenerator(config).generate()

        self.assertIsInstance(puzzle, SoletraPuzzle)
        self.assertEqual(puzzle.center_letter, "E")
        self.assertEqual(puzzle.letters[0], "E")
        self.assertGreaterEqual(len(puzzle.valid_words), 20)
        self.assertTrue(all("E" in w for w in puzzle.valid_words))

    def test_soletra_from_theme(self):
        """Test Soletra derives its letters from the theme."""
        config = GeneratorConfig(
            game_type="soletra", difficulty="medium", title="Arte",
            theme="artista retrato estória teatro", seed=6,
        )

        puzzle = PuzzleGenerator(config).generate()

        self.assertEqual(sorted(puzzle.letters), sorted("AERSTOI"))

    def test_soletra_fallback_letters(self):
        """Test Soletra without letters or theme uses the fallback set."""
        config = GeneratorConfig(game_type="soletra", difficulty="easy", title="Soletra", seed=7)

        with self.assertLogs('puzzle_generator', level='WARNING'):
            puzzle = PuzzleGenerator(config).generate()

        self.assertEqual(puzzle.center_letter, "A")

    def test_shared_dictionary_loads_once(self):
        """Test generators sharing a provider load the dictionary once."""
        loads = []

        def loader():
            loads.append(1)
            return DictionaryIndex.build("arte\ntear\norata\nrato\n")

        provider = DictionaryProvider(loader=loader)
        config = GeneratorConfig(
            game_type="soletra", difficulty="easy", title="Soletra",
            letters=list("AERSTOI"), center_letter="A",
        )

        for seed in range(3):
            PuzzleGenerator(config, dictionary=provider, rng=random.Random(seed)).generate()

        self.assertEqual(len(loads), 1)

    def test_seed_reproducible(self):
        """Test the same seed produces the same puzzle."""
        config = GeneratorConfig(
            game_type="wordsearch", difficulty="easy", title="Bichos",
            words=["GATO", "CASA", "SOL"], seed=8,
        )

        first = PuzzleGenerator(config).generate()
        second = PuzzleGenerator(config).generate()

        self.assertEqual(first.to_dict(), second.to_dict())


class TestFormatting(unittest.TestCase):
    """Tests for serialization."""

    def test_yaml_round_trip(self):
        """Test YAML output loads back into an equal puzzle."""
        config = GeneratorConfig(game_type="sudoku", difficulty="easy", title="Sudoku", seed=9)
        puzzle = PuzzleGenerator(config).generate()

        data = yaml.safe_load(format_puzzle(puzzle, "yaml"))

        self.assertEqual(puzzle_from_dict(data).to_dict(), puzzle.to_dict())

    def test_json_keeps_accents(self):
        """Test JSON output is UTF-8 text, not escaped."""
        config = GeneratorConfig(
            game_type="wordsearch", difficulty="easy", title="Sopa de Letras",
            description="Animais do zoológico", words=["GATO"], seed=10,
        )
        puzzle = PuzzleGenerator(config).generate()

        text = format_puzzle(puzzle, "json")

        self.assertIn("zoológico", text)
        self.assertEqual(json.loads(text)['name'], "Sopa de Letras")


class TestWordFiles(unittest.TestCase):
    """Tests for word-file loading and theme parsing."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def write(self, name, text):
        path = os.path.join(self.temp_dir, name)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(text)
        return path

    def test_plain_lines(self):
        """Test WORD and WORD;clue lines, skipping comments."""
        path = self.write("palavras.txt", "# casa\ncasa;Lugar onde se mora\n\nsol\n")

        words = load_word_file(path)

        self.assertEqual([w.word for w in words], ["CASA", "SOL"])
        self.assertEqual(words[0].clue, "Lugar onde se mora")
        self.assertEqual(words[1].clue, "")

    def test_yaml_list(self):
        """Test a YAML list of strings and mappings."""
        path = self.write("palavras.yaml", "- gato\n- word: ação\n  clue: Atitude\n")

        words = load_word_file(path)

        self.assertEqual([w.word for w in words], ["GATO", "ACAO"])
        self.assertEqual(words[1].clue, "Atitude")

    def test_missing_file(self):
        """Test an unreadable file raises OSError."""
        with self.assertRaises(OSError):
            load_word_file(os.path.join(self.temp_dir, "nada.txt"))

    def test_theme_words_from(self):
        """Test theme text splits on spaces, commas and semicolons."""
        self.assertEqual(
            theme_words_from("arte, teatro;  música", ["tela"]),
            ["arte", "teatro", "música", "TELA"],
        )


class TestMain(unittest.TestCase):
    """Tests for the command-line entry point."""

    def run_main(self, argv):
        with mock.patch('sys.stdout', new_callable=io.StringIO) as out, \
                mock.patch('sys.stderr', new_callable=io.StringIO) as err:
            code = main(argv)
        return code, out.getvalue(), err.getvalue()

    def test_json_output(self):
        """Test a word search is written to stdout as JSON."""
        code, out, _ = self.run_main([
            "--game", "wordsearch", "--difficulty", "easy", "--title", "Bichos",
            "--words", "GATO,CASA,SOL", "--seed", "11", "--format", "json",
        ])

        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual(data['gameType'], "wordsearch")
        self.assertEqual(sorted(data['suggestions']), ["CASA", "GATO", "SOL"])

    def test_yaml_output(self):
        """Test Soletra is written to stdout as YAML by default."""
        code, out, _ = self.run_main([
            "--game", "soletra", "--difficulty", "easy", "--title", "Soletra",
            "--letters", "AERSTOI", "--center", "E", "--seed", "12",
        ])

        self.assertEqual(code, 0)
        data = yaml.safe_load(out)
        self.assertEqual(data['centerLetter'], "E")

    def test_soletra_theme(self):
        """Test Soletra letters are derived from --theme."""
        code, out, _ = self.run_main([
            "--game", "soletra", "--title", "Arte",
            "--theme", "artista retrato estoria teatro", "--seed", "14", "--format", "json",
        ])

        self.assertEqual(code, 0)
        self.assertEqual(sorted(json.loads(out)["letters"]), sorted("AERSTOI"))

    def test_dry_run(self):
        """Test dry-run prints the configuration without generating."""
        code, out, _ = self.run_main(["--game", "sudoku", "--dry-run"])

        self.assertEqual(code, 0)
        self.assertIn("Configuration valid:", out)
        self.assertIn("Game: sudoku", out)

    def test_words_file(self):
        """Test words are read from --words-file."""
        temp_dir = tempfile.mkdtemp()
        try:
            path = os.path.join(temp_dir, "palavras.txt")
            with open(path, 'w', encoding='utf-8') as f:
                f.write("gato\ncasa\nsol\n")

            code, out, _ = self.run_main([
                "--game", "wordsearch", "--title", "Bichos", "--words-file", path,
                "--seed", "13", "--format", "json", "--dry-run",
            ])
        finally:
            shutil.rmtree(temp_dir)

        self.assertEqual(code, 0)
        self.assertIn("Words: 3", out)

    def test_missing_config(self):
        """Test a missing config file exits with status 1."""
        code, _, err = self.run_main(["--config", "/nonexistent/puzzle.yaml"])

        self.assertEqual(code, 1)
        self.assertIn("Configuration error", err)

    def test_missing_words_file(self):
        """Test an unreadable word file exits with status 1."""
        code, _, err = self.run_main(["--words-file", "/nonexistent/palavras.txt"])

        self.assertEqual(code, 1)
        self.assertIn("Could not read input", err)

    def test_generation_error(self):
        """Test a crossword without words exits with status 1."""
        code, _, err = self.run_main(["--game", "crossword", "--title", "Vazio"])

        self.assertEqual(code, 1)
        self.assertIn("Error:", err)


if __name__ == '__main__':
    unittest.main()
