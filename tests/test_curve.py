import pytest

from sm_keys.curve import CurvePoint, sm2p256v1


@pytest.fixture()
def curve():
    return sm2p256v1


@pytest.fixture()
def g(curve):
    return curve.base_point()


class TestCurvePoint:
    def test_double(self, g):
        point = g.to_jacobian_point().double().to_curve_point()
        assert point == g.scalar_mult(2)

    def test_scalar_mult(self, g, curve):
        k = int('17862946205452999060962975573530209623112644258847452921350520798185987396203', 16)
        point = g.scalar_mult(k)
        assert curve.is_on_curve(point.x, point.y)

        assert point.x == int('460333f094dcda438a35cb64ced03d04cc3694b598edb055056ce93c2149c0a8', 16)
        assert point.y == int('255130b63b4b096c29c4db80148d27a1c3944a466d14b8f8f9aac68d35a2d1fb', 16)

    def test_scalar_mult_one(self, g):
        assert g.scalar_mult(1) == g

    def test_scalar_mult_order(self, g, curve):
        # [n]G 为无穷远点
        assert g.scalar_mult(curve.n) is None

    def test_scalar_mult_zero(self, g):
        with pytest.raises(ValueError):
            g.scalar_mult(0)


class TestSM2P256Curve:
    def test_is_on_curve(self, curve):
        assert curve.is_on_curve(curve.gx, curve.gy)
        assert not curve.is_on_curve(curve.gx, curve.gy + 1)
        assert not curve.is_on_curve(curve.p, curve.gy)

    def test_sizes(self, curve):
        assert curve.field_size == 32
        assert curve.order_size == 32

    def test_public_key_from_private_key(self, curve):
        d = int('8d68cf85fdabdb8b3dae0169019dfce36497f1de874798c35232de84f015af6a', 16)
        point = curve.scalar_base_mult(d)
        assert point.x == int('4667834cbeefba02aa360ad2c14a87e43e248f4876e9724b5cb620a12d7eca83', 16)
        assert point.y == int('56b9a5df4aa1050149aa6dfb6da1953f87e70f8733fb5680c6ea36f3bb8a6f03', 16)

    def test_marshal(self, curve):
        data = curve.marshal(1, 2)
        assert len(data) == 65
        assert data[0] == 0x04
        assert data[1:33] == b'\x00' * 31 + b'\x01'
        assert data[33:] == b'\x00' * 31 + b'\x02'

    def test_unmarshal(self, curve):
        data = curve.marshal(curve.gx, curve.gy)
        assert curve.unmarshal(data) == (curve.gx, curve.gy)

    @pytest.mark.parametrize('data', [
        b'',
        b'\x04' + b'\x00' * 63,
        b'\x02' + b'\x00' * 64,
    ])
    def test_unmarshal_invalid(self, curve, data):
        assert curve.unmarshal(data) is None

    def test_unmarshal_not_on_curve(self, curve):
        assert curve.unmarshal(curve.marshal(curve.gx, curve.gy + 1)) is None

    def test_point_equal(self, curve):
        assert CurvePoint(1, 2, curve) == CurvePoint(1, 2, curve)
        assert CurvePoint(1, 2, curve) != CurvePoint(2, 1, curve)
