from collections import OrderedDict
from AINNCS.models import (acc, airplane, spacecraft, attitude, single_pendulum,
                           double_pendulum, vertcas, quadrotor, unicycle, tora)

# Benchmarks in the order they are run
BENCHMARKS = OrderedDict([
    ('ACC', acc.run),
    ('Airplane', airplane.run),
    ('Spacecraft', spacecraft.run),
    ('AttitudeControl', attitude.run),
    ('Single-Pendulum', single_pendulum.run),
    ('Double-Pendulum', double_pendulum.run),
    ('VertCAS', vertcas.run),
    ('Quadrotor', quadrotor.run),
    ('Sherlock-Benchmark-10-Unicycle', unicycle.run),
    ('Sherlock-Benchmark-9-TORA', tora.run),
])

MODULES = [acc, airplane, spacecraft, attitude, single_pendulum,
           double_pendulum, vertcas, quadrotor, unicycle, tora]
