import ezdxf

import dxfbin

SAMPLE = "/tmp/walk_records_binary.dxf"


def main() -> None:
    doc = ezdxf.new("R2010")
    doc.modelspace().add_circle((4, 5), radius=2.5)
    doc.saveas(SAMPLE, fmt="bin")

    with dxfbin.open_reader(SAMPLE) as reader:
        while True:
            code, position = reader.advance()
            if code == 0:
                name = reader.read_string()
                print(f"{position:>8} entity/marker: {name}")
                if name == "EOF":
                    break
            elif 10 <= code <= 39:
                print(f"{position:>8} coordinate {code}: {reader.read_double()}")
            elif code == 5 or 330 <= code <= 369:
                print(f"{position:>8} handle {code}: {reader.read_hex()}")


if __name__ == "__main__":
    main()
