"""ETL staging use case: process data through stages kept in one bucket."""
import pytest


def test_stage_data_processing(bfs):
    """Simulate ETL: raw → processed → output."""
    raw_data = b"id,name,value\n1,foo,100\n2,bar,200\n"
    bfs.write_file("raw/data.csv", raw_data)

    processed = bfs.read_file("raw/data.csv").upper()
    with bfs.create_file("processed/data.csv") as f:
        f.write(processed)

    assert bfs.read_file("processed/data.csv") == raw_data.upper()
    assert bfs.listdir() == ["processed", "raw"]


def test_partitioned_layout(bfs):
    for day in ("2024-01-01", "2024-01-02", "2024-02-01"):
        for part in range(3):
            bfs.write_file(f"lake/dt={day}/part-{part}.csv", b"a,b\n")

    january = bfs.glob("lake/dt=2024-01-*/*.csv")
    assert len(january) == 6
    assert january[0] == "lake/dt=2024-01-01/part-0.csv"
    assert bfs.glob("lake/dt=2024-02-01/part-[12].csv") == [
        "lake/dt=2024-02-01/part-1.csv",
        "lake/dt=2024-02-01/part-2.csv",
    ]


def test_staging_cleanup(bfs):
    """After ETL, staging area can be cleaned."""
    for i in range(20):
        bfs.write_file(f"staging/tmp/{i:03d}.bin", b"x" * 100)
    bfs.write_file("output/result.bin", b"done")

    bfs.remove_all("staging")

    assert not bfs.exists("staging")
    assert bfs.listdir() == ["output"]


def test_walk_counts_files(bfs):
    for path in ("raw/a.csv", "raw/b.csv", "raw/old/c.csv", "output/d.csv"):
        bfs.write_file(path, b"")
    total = sum(len(files) for _, _, files in bfs.walk())
    assert total == 4


def test_staged_view_is_isolated(bfs):
    bfs.write_file("job1/in.csv", b"1")
    bfs.write_file("job2/in.csv", b"2")
    job = bfs.sub("job1")
    job.write_file("out.csv", job.read_file("in.csv") * 2)
    job.remove_all(".")
    assert bfs.listdir() == ["job2"]
    with pytest.raises(FileNotFoundError):
        bfs.read_file("job1/out.csv")
