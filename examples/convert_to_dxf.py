import ezdxf

import dxfbin


doc = ezdxf.new("R2010")
doc.modelspace().add_line((0, 0), (10, 5))
doc.saveas("/tmp/line_2010_binary.dxf", fmt="bin")

result = dxfbin.to_dxf(
    "/tmp/line_2010_binary.dxf",
    "/tmp/line_2010_ascii.dxf",
    encoding="utf-8",
)
print(result)
