from __future__ import annotations

import numpy as np
import pytest

from manifold_reduction.cli import build_parser, main
from tests.helpers import curved_grid


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    np.savetxt(tmp_path / "input.dat", curved_grid().T)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_default_files(workdir):
    assert main(["isomap", "brute", "dense", "8", "2"]) == 0
    embedding = np.loadtxt(workdir / "output.dat")
    assert embedding.shape == (2, 64)


@pytest.mark.parametrize(
    "argv",
    [
        ["lmds", "covertree", "arpack", "5", "3"],
        ["klle", "covertree", "dense", "8", "2"],
        ["pca", "brute", "randomized", "4", "1"],
    ],
)
def test_method_combinations(workdir, argv):
    assert main(argv) == 0
    lines = (workdir / "output.dat").read_text().splitlines()
    assert len(lines) == int(argv[-1])


def test_explicit_paths_and_precompute(workdir):
    output = workdir / "nested.txt"
    assert main(["kpca", "brute", "dense", "4", "2", "--output", str(output), "--precompute"]) == 0
    assert np.loadtxt(output).shape == (2, 64)
    assert not (workdir / "output.dat").exists()


def test_unknown_method_prints_usage(workdir, capsys):
    assert main(["tsne", "brute", "dense", "8", "2"]) == 1
    err = capsys.readouterr().err
    assert "usage:" in err
    assert "'tsne'" in err
    assert not (workdir / "output.dat").exists()


def test_unknown_eigen_method(workdir, capsys):
    assert main(["isomap", "brute", "lanczos", "8", "2"]) == 1
    assert "Eigen method 'lanczos' is not supported" in capsys.readouterr().err


def test_wrong_arity_exits(workdir):
    with pytest.raises(SystemExit) as excinfo:
        main(["isomap", "brute", "dense", "8"])
    assert excinfo.value.code != 0


def test_neighbor_count_too_large(workdir, capsys):
    assert main(["isomap", "brute", "dense", "64", "2"]) == 1
    assert "Number of neighbors" in capsys.readouterr().err
    assert not (workdir / "output.dat").exists()


def test_missing_input(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["pca", "brute", "dense", "2", "1"]) == 1


def test_verbose_logs_dataset_shape(workdir, caplog):
    with caplog.at_level("INFO", logger="manifold_reduction"):
        assert main(["pca", "brute", "dense", "2", "2", "-v"]) == 0
    assert "Data contains 64 feature vectors with dimension of 3" in caplog.text


def test_parser_lists_supported_tokens():
    help_text = build_parser().format_help()
    for token in ("diffusion_map", "covertree", "randomized"):
        assert token in help_text


def test_neighbor_count_is_ignored_by_methods_without_neighbors(workdir):
    assert main(["pca", "brute", "dense", "0", "2"]) == 0
    assert np.loadtxt(workdir / "output.dat").shape == (2, 64)
